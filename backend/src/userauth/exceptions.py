"""Custom exception classes for the application.

Each exception carries the HTTP status code and the error tag that the
Lambda handlers put in the response body, so the handlers can translate
any failure without knowing where it came from.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        error: Machine-readable error tag.
        detail: Optional additional context.
    """

    error_tag = "InternalError"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
        error: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail
        self.error = error or self.error_tag

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        result: dict[str, Any] = {"message": self.message, "error": self.error}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when input validation fails.

    Always detected locally, before any remote call is made.
    """

    error_tag = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None):
        detail = f"Field: {field}" if field else None
        super().__init__(message, status_code=400, detail=detail)
        self.field = field


class DuplicateUserError(AppError):
    """Raised when a profile already exists for the email being registered."""

    error_tag = "DuplicateUser"

    def __init__(self, message: str = "User with this email already exists"):
        super().__init__(message, status_code=409)


class InvalidSignInResponseError(AppError):
    """Raised when the identity provider accepts a sign in but returns no
    access token."""

    error_tag = "InvalidSignInResponse"

    def __init__(self, message: str = "Invalid sign in response"):
        super().__init__(message, status_code=401)


class SignUpFailedError(AppError):
    """Raised when the sign-up saga ends in one of its failure states.

    The error tag names the state the system was left in so an operator
    can tell whether manual cleanup is needed.
    """

    def __init__(self, outcome: str, message: str = "Sign up failed"):
        super().__init__(message, status_code=500, error=outcome)
        self.outcome = outcome


class IdentityProviderError(AppError):
    """Raised when a call to the identity provider fails.

    Attributes:
        code: The provider's error code, e.g. ``NotAuthorizedException``.
    """

    def __init__(self, code: str, message: Optional[str] = None):
        from userauth.identity.errors import classify_provider_error

        super().__init__(
            message or f"Identity provider request failed: {code}",
            status_code=classify_provider_error(code),
            error=code,
        )
        self.code = code


class ConfigurationError(AppError):
    """Raised when required configuration is missing."""

    error_tag = "ConfigurationError"

    def __init__(self, config_name: str):
        super().__init__(
            f"Missing required configuration: {config_name}",
            status_code=500,
        )
        self.config_name = config_name


class DatabaseError(AppError):
    """Raised when a profile store operation fails."""

    error_tag = "DatabaseError"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message,
            status_code=500,
            detail=detail,
        )
