"""User authentication API handlers.

Each public operation has its own Lambda entrypoint:

    sign_up_handler        POST /v1/auth/sign-up
    confirm_email_handler  POST /v1/auth/confirm-email
    sign_in_handler        POST /v1/auth/sign-in
    sign_out_handler       POST /v1/auth/sign-out

Cognito is the system of record for credentials; the DynamoDB users
table mirrors the profile and its confirmation status. Every failure is
translated into a JSON response here, nothing propagates to the Lambda
runtime.
"""

from __future__ import annotations

import time
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional

from pydantic import BaseModel

from userauth.api.schemas import MessageResponse
from userauth.api.schemas import SignInResponse
from userauth.api.schemas import SignUpResponse
from userauth.config import get_settings
from userauth.exceptions import AppError
from userauth.exceptions import ConfigurationError
from userauth.exceptions import DuplicateUserError
from userauth.exceptions import IdentityProviderError
from userauth.exceptions import InvalidSignInResponseError
from userauth.exceptions import SignUpFailedError
from userauth.identity.cognito import CognitoIdentityProvider
from userauth.services.signup_saga import SignUpSaga
from userauth.store.user_store import UserStore
from userauth.utils import error_response
from userauth.utils import json_response
from userauth.utils import parse_json_body
from userauth.utils import require_fields
from userauth.utils.logging import clear_request_context
from userauth.utils.logging import configure_logging
from userauth.utils.logging import get_logger
from userauth.utils.logging import log_response
from userauth.utils.logging import mask_email
from userauth.utils.logging import set_request_context_from_event
from userauth.utils.responses import validate_content_type

configure_logging()
logger = get_logger(__name__)

SIGN_UP_FAILED = "Sign up failed"
CONFIRM_EMAIL_FAILED = "Email confirmation failed"
SIGN_IN_FAILED = "Sign in failed"
SIGN_OUT_FAILED = "Sign out failed"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AuthService:
    """Auth operations composed from the identity provider and user store.

    Args:
        identity_provider: Cognito wrapper used for every operation.
        user_store: Profile store. Only sign up and email confirmation
            touch it, so it may be omitted for sign in and sign out.
    """

    def __init__(
        self,
        identity_provider: CognitoIdentityProvider,
        user_store: Optional[UserStore] = None,
    ):
        self._identity_provider = identity_provider
        self._user_store = user_store

    @property
    def user_store(self) -> UserStore:
        if self._user_store is None:
            raise ConfigurationError("USERS_TABLE")
        return self._user_store

    def sign_up(self, email: str, password: str, full_name: str) -> SignUpResponse:
        """Register a user in Cognito and create their PENDING profile.

        The email pre-check is not atomic with the later write; two
        concurrent sign ups for one email can both pass it.

        Raises:
            DuplicateUserError: If a profile already exists for the email.
            IdentityProviderError: If Cognito rejects the sign up.
            SignUpFailedError: If the profile write failed after Cognito
                accepted the sign up.
        """
        store = self.user_store
        if store.find_by_email(email) is not None:
            logger.info(f"Sign up rejected, profile exists for {mask_email(email)}")
            raise DuplicateUserError()

        saga = SignUpSaga(identity_provider=self._identity_provider, user_store=store)
        result = saga.run(email, password, full_name)
        if not result.succeeded:
            raise SignUpFailedError(result.outcome.value)

        return SignUpResponse(
            message="Sign up successful. Please confirm your email.",
            user_confirmed=result.registration.user_confirmed,
            user_sub=result.registration.user_sub,
            user=result.profile,
        )

    def confirm_email(self, email: str, confirmation_code: str) -> MessageResponse:
        """Confirm the Cognito sign up, then mark the profile CONFIRMED.

        A missing profile does not fail the confirmation.
        """
        store = self.user_store
        self._identity_provider.confirm_sign_up(email, confirmation_code)

        updated = store.set_confirmed_by_email(email)
        if updated is None:
            logger.warning(
                f"Email confirmed in Cognito but no profile exists for {mask_email(email)}"
            )
        else:
            logger.info("Profile confirmed", extra={"user_id": updated.user_id})

        return MessageResponse(message="Email confirmed successfully")

    def sign_in(self, email: str, password: str) -> SignInResponse:
        """Authenticate with email and password.

        Raises:
            InvalidSignInResponseError: If Cognito answers without an
                access token (for example with a challenge).
        """
        tokens = self._identity_provider.initiate_auth(email, password)
        if not tokens.access_token:
            logger.warning(f"Sign in for {mask_email(email)} returned no access token")
            raise InvalidSignInResponseError()

        return SignInResponse(
            message="Sign in successful",
            access_token=tokens.access_token,
            id_token=tokens.id_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
            token_type=tokens.token_type,
        )

    def sign_out(self, access_token: str) -> MessageResponse:
        """Invalidate every token issued to the user."""
        self._identity_provider.global_sign_out(access_token)
        return MessageResponse(message="Sign out successful")


def build_service(with_store: bool = True) -> AuthService:
    """Build an AuthService from the environment."""
    settings = get_settings()
    return AuthService(
        identity_provider=CognitoIdentityProvider.from_settings(settings),
        user_store=UserStore.from_settings(settings) if with_store else None,
    )


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def _error_response(
    exc: AppError,
    failure_message: str,
    event: Mapping[str, Any],
) -> dict[str, Any]:
    """Translate an application error into a response.

    Provider and server-side errors are reported under the operation's
    failure message with only their error tag; client errors keep their
    own message.
    """
    if isinstance(exc, IdentityProviderError) or exc.status_code >= 500:
        return error_response(
            exc, message=failure_message, event=event, include_detail=False
        )
    return error_response(exc, event=event)


def _handle(
    event: Mapping[str, Any],
    context: Any,
    failure_message: str,
    action: Callable[[dict[str, Any]], BaseModel],
) -> dict[str, Any]:
    """Run *action* on the request body with common logging and error handling."""
    event = event or {}
    start_time = time.perf_counter()
    set_request_context_from_event(event, context)
    try:
        response = _dispatch(event, failure_message, action)
        log_response(
            logger,
            response["statusCode"],
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return response
    finally:
        clear_request_context()


def _dispatch(
    event: Mapping[str, Any],
    failure_message: str,
    action: Callable[[dict[str, Any]], BaseModel],
) -> dict[str, Any]:
    try:
        validate_content_type(event)
        body = parse_json_body(event)
        return json_response(200, action(body), event=event)
    except AppError as exc:
        if exc.status_code >= 500:
            logger.error(f"{failure_message}: {exc.error}")
        else:
            logger.warning(f"{failure_message}: {exc.error}")
        return _error_response(exc, failure_message, event)
    except Exception:
        logger.exception(f"Unexpected error: {failure_message}")
        return json_response(
            500,
            {"message": failure_message, "error": "InternalError"},
            event=event,
        )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def sign_up_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle a sign-up request: ``{email, password, fullName}``."""

    def action(body: dict[str, Any]) -> BaseModel:
        email, password, full_name = require_fields(
            body, ("email", "password", "fullName")
        )
        return build_service().sign_up(email, password, full_name)

    return _handle(event, context, SIGN_UP_FAILED, action)


def confirm_email_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle an email confirmation request: ``{email, confirmationCode}``."""

    def action(body: dict[str, Any]) -> BaseModel:
        email, confirmation_code = require_fields(body, ("email", "confirmationCode"))
        return build_service().confirm_email(email, confirmation_code)

    return _handle(event, context, CONFIRM_EMAIL_FAILED, action)


def sign_in_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle a sign-in request: ``{email, password}``."""

    def action(body: dict[str, Any]) -> BaseModel:
        email, password = require_fields(body, ("email", "password"))
        return build_service(with_store=False).sign_in(email, password)

    return _handle(event, context, SIGN_IN_FAILED, action)


def sign_out_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle a sign-out request: ``{accessToken}``."""

    def action(body: dict[str, Any]) -> BaseModel:
        (access_token,) = require_fields(body, ("accessToken",))
        return build_service(with_store=False).sign_out(access_token)

    return _handle(event, context, SIGN_OUT_FAILED, action)
