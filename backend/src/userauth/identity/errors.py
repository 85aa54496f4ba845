"""Classification of identity provider error codes."""

from __future__ import annotations

import enum
from typing import Optional


class ProviderErrorCode(str, enum.Enum):
    """Provider error codes caused by the caller's input.

    Any code outside this enumeration is treated as a server-side failure.
    """

    NOT_AUTHORIZED = "NotAuthorizedException"
    USERNAME_EXISTS = "UsernameExistsException"
    INVALID_PASSWORD = "InvalidPasswordException"
    CODE_MISMATCH = "CodeMismatchException"
    EXPIRED_CODE = "ExpiredCodeException"


def parse_provider_error_code(code: Optional[str]) -> Optional[ProviderErrorCode]:
    """Return the matching client-error code, or None for anything else."""
    if not code:
        return None
    try:
        return ProviderErrorCode(code)
    except ValueError:
        return None


def classify_provider_error(code: Optional[str]) -> int:
    """Map a provider error code to the HTTP status reported to the caller.

    Args:
        code: The provider error code, or None when it is unknown.

    Returns:
        400 for a known client-error code, 500 otherwise.
    """
    if parse_provider_error_code(code) is None:
        return 500
    return 400
