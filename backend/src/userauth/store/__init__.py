"""Profile persistence backed by DynamoDB."""

from userauth.store.models import ProfileRef, UserProfile, UserStatus
from userauth.store.user_store import UserStore

__all__ = [
    "ProfileRef",
    "UserProfile",
    "UserStatus",
    "UserStore",
]
