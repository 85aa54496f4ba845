"""Identity provider integration (Amazon Cognito)."""

from userauth.identity.cognito import (
    AuthTokens,
    CognitoIdentityProvider,
    Registration,
)
from userauth.identity.errors import (
    ProviderErrorCode,
    classify_provider_error,
)

__all__ = [
    "AuthTokens",
    "CognitoIdentityProvider",
    "ProviderErrorCode",
    "Registration",
    "classify_provider_error",
]
