"""Runtime configuration read from the Lambda environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from userauth.exceptions import ConfigurationError

DEFAULT_EMAIL_INDEX = "EmailIndex"


@dataclass(frozen=True)
class Settings:
    """Environment-derived settings for the auth handlers.

    Attributes:
        region: AWS region for the Cognito and DynamoDB clients.
        client_id: Cognito app client id.
        users_table: DynamoDB table holding user profiles.
        users_email_index: Name of the email secondary index.
        user_pool_id: Cognito user pool id. Only needed to roll back a
            sign up whose profile write failed.
    """

    region: Optional[str]
    client_id: Optional[str]
    users_table: Optional[str]
    users_email_index: str = DEFAULT_EMAIL_INDEX
    user_pool_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the current environment."""
        return cls(
            region=os.getenv("region") or os.getenv("AWS_REGION") or None,
            client_id=os.getenv("CLIENT_ID") or None,
            users_table=os.getenv("USERS_TABLE") or None,
            users_email_index=os.getenv("USERS_EMAIL_INDEX") or DEFAULT_EMAIL_INDEX,
            user_pool_id=os.getenv("USER_POOL_ID") or None,
        )

    def require_client_id(self) -> str:
        if not self.client_id:
            raise ConfigurationError("CLIENT_ID")
        return self.client_id

    def require_users_table(self) -> str:
        if not self.users_table:
            raise ConfigurationError("USERS_TABLE")
        return self.users_table


def get_settings() -> Settings:
    """Return settings for the current invocation.

    Read on every call so that environment changes between warm
    invocations (and in tests) are picked up.
    """
    return Settings.from_env()
