"""Utility modules for the backend application."""

from userauth.utils.parsers import parse_json_body, require_fields
from userauth.utils.responses import error_response, json_response
from userauth.utils.logging import (
    configure_logging,
    get_logger,
    mask_email,
    set_request_context,
    clear_request_context,
)

__all__ = [
    "clear_request_context",
    "configure_logging",
    "error_response",
    "get_logger",
    "json_response",
    "mask_email",
    "parse_json_body",
    "require_fields",
    "set_request_context",
]
