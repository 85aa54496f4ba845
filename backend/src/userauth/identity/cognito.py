"""Amazon Cognito user pool client.

Wraps the handful of ``cognito-idp`` calls the auth handlers need and
turns every boto3 failure into an :class:`IdentityProviderError` that
carries the provider's error code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Optional

from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from userauth.config import Settings
from userauth.config import get_settings
from userauth.exceptions import ConfigurationError
from userauth.exceptions import IdentityProviderError
from userauth.services.aws_clients import get_cognito_idp_client
from userauth.utils.logging import get_logger
from userauth.utils.logging import mask_email

logger = get_logger(__name__)

PASSWORD_AUTH_FLOW = "USER_PASSWORD_AUTH"


@dataclass(frozen=True)
class Registration:
    """Result of a successful sign up."""

    user_confirmed: bool
    user_sub: str


@dataclass(frozen=True)
class AuthTokens:
    """Tokens returned by a password authentication."""

    access_token: Optional[str] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None

    @classmethod
    def from_authentication_result(
        cls, result: Optional[dict[str, Any]]
    ) -> "AuthTokens":
        result = result or {}
        return cls(
            access_token=result.get("AccessToken"),
            id_token=result.get("IdToken"),
            refresh_token=result.get("RefreshToken"),
            expires_in=result.get("ExpiresIn"),
            token_type=result.get("TokenType"),
        )


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code") or "UnknownError"
    return type(exc).__name__


class CognitoIdentityProvider:
    """Identity provider operations against a Cognito user pool.

    Args:
        client_id: The app client id used for public sign up and sign in.
        user_pool_id: The user pool id. Admin operations are unavailable
            without it.
        client: A ``cognito-idp`` boto3 client.
    """

    def __init__(
        self,
        client_id: str,
        user_pool_id: Optional[str] = None,
        client: Any = None,
    ):
        self._client_id = client_id
        self._user_pool_id = user_pool_id
        self._client = client if client is not None else get_cognito_idp_client()

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None
    ) -> "CognitoIdentityProvider":
        settings = settings or get_settings()
        return cls(
            client_id=settings.require_client_id(),
            user_pool_id=settings.user_pool_id,
            client=get_cognito_idp_client(settings.region),
        )

    @property
    def can_delete_users(self) -> bool:
        """Whether the admin user pool id needed for deletes is configured."""
        return bool(self._user_pool_id)

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, operation)(**params)
        except (ClientError, BotoCoreError) as exc:
            code = _error_code(exc)
            logger.warning(
                f"Cognito {operation} failed",
                extra={"error_code": code},
            )
            raise IdentityProviderError(code) from exc

    def sign_up(self, email: str, password: str, full_name: str) -> Registration:
        """Register a new user with email as the username."""
        response = self._call(
            "sign_up",
            ClientId=self._client_id,
            Username=email,
            Password=password,
            UserAttributes=[
                {"Name": "email", "Value": email},
                {"Name": "name", "Value": full_name},
            ],
        )
        logger.info(f"Cognito sign up accepted for {mask_email(email)}")
        return Registration(
            user_confirmed=bool(response.get("UserConfirmed")),
            user_sub=response.get("UserSub", ""),
        )

    def confirm_sign_up(self, email: str, confirmation_code: str) -> None:
        self._call(
            "confirm_sign_up",
            ClientId=self._client_id,
            Username=email,
            ConfirmationCode=confirmation_code,
        )

    def initiate_auth(self, email: str, password: str) -> AuthTokens:
        """Authenticate with username and password.

        The returned bundle may be empty when Cognito answers with a
        challenge instead of an authentication result.
        """
        response = self._call(
            "initiate_auth",
            ClientId=self._client_id,
            AuthFlow=PASSWORD_AUTH_FLOW,
            AuthParameters={"USERNAME": email, "PASSWORD": password},
        )
        return AuthTokens.from_authentication_result(
            response.get("AuthenticationResult")
        )

    def global_sign_out(self, access_token: str) -> None:
        self._call("global_sign_out", AccessToken=access_token)

    def admin_delete_user(self, email: str) -> None:
        """Delete a user from the pool.

        Raises:
            ConfigurationError: If no user pool id is configured.
            IdentityProviderError: If Cognito rejects the delete.
        """
        if not self._user_pool_id:
            raise ConfigurationError("USER_POOL_ID")
        self._call(
            "admin_delete_user",
            UserPoolId=self._user_pool_id,
            Username=email,
        )
        logger.info(f"Deleted Cognito user {mask_email(email)}")
