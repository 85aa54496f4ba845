"""Shared response utilities for Lambda handlers."""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from typing import Any
from typing import Mapping
from typing import Optional

from pydantic import BaseModel

from userauth.exceptions import AppError
from userauth.exceptions import ValidationError


def validate_content_type(
    event: Mapping[str, Any],
    required_methods: tuple[str, ...] = ("POST", "PUT", "PATCH"),
) -> None:
    """Validate the Content-Type header of an HTTP request with a body.

    Direct Lambda invocations carry no ``httpMethod`` and are not checked.

    Raises:
        ValidationError: If Content-Type is missing or not application/json.
    """
    method = event.get("httpMethod", "")
    if method not in required_methods:
        return

    headers = event.get("headers") or {}

    content_type = None
    for key, value in headers.items():
        if key.lower() == "content-type":
            content_type = str(value).lower().strip()
            break

    if not content_type:
        raise ValidationError(
            "Content-Type header is required for requests with a body",
            field="Content-Type",
        )

    # Allows parameters such as "application/json; charset=utf-8"
    if not content_type.startswith("application/json"):
        raise ValidationError(
            "Content-Type must be application/json",
            field="Content-Type",
        )


def get_security_headers() -> dict[str, str]:
    """Headers added to every response.

    Responses carry tokens, so they must never be cached.
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store, no-cache, must-revalidate",
        "Pragma": "no-cache",
    }


def get_cors_headers(
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, str]:
    """Get CORS headers for the response.

    The request origin is echoed back when it is listed in
    CORS_ALLOWED_ORIGINS; with no list configured any origin is allowed.
    """
    allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS", "")
    allowed_origins = [
        origin.strip()
        for origin in allowed_origins_env.split(",")
        if origin.strip()
    ]

    request_origin = None
    if event:
        headers = event.get("headers") or {}
        request_origin = headers.get("origin") or headers.get("Origin")

    if not allowed_origins:
        allow_origin = "*"
    elif request_origin and request_origin in allowed_origins:
        allow_origin = request_origin
    else:
        allow_origin = allowed_origins[0]

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
    }


def json_response(
    status_code: int,
    body: Any,
    headers: Optional[dict[str, str]] = None,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create a JSON API Gateway proxy response.

    Args:
        status_code: HTTP status code.
        body: Response body (dict, Pydantic model, or dataclass).
        headers: Optional additional headers to include.
        event: Optional Lambda event for CORS origin detection.
    """
    response_headers = {
        "Content-Type": "application/json",
    }
    response_headers.update(get_security_headers())
    response_headers.update(get_cors_headers(event))
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(_serialize_body(body), default=str),
    }


def _serialize_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(by_alias=True, mode="json", exclude_none=False)

    if hasattr(body, "__dataclass_fields__"):
        return asdict(body)

    return body


def error_response(
    exc: AppError,
    message: Optional[str] = None,
    event: Optional[Mapping[str, Any]] = None,
    include_detail: bool = True,
) -> dict[str, Any]:
    """Create an error response from an application exception.

    Args:
        exc: The exception to report.
        message: Overrides the exception message in the body.
        event: Optional Lambda event for CORS origin detection.
        include_detail: Whether to expose the exception detail.
    """
    body = exc.to_dict()
    if message:
        body["message"] = message
    if not include_detail:
        body.pop("detail", None)
    return json_response(exc.status_code, body, event=event)
