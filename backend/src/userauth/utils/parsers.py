"""Shared parsing utilities for request handling."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any
from typing import Mapping
from typing import Sequence

from userauth.exceptions import ValidationError


def parse_json_body(event: Mapping[str, Any]) -> dict[str, Any]:
    """Parse the JSON body of a Lambda event.

    API Gateway delivers the body as a string; direct invocations may pass
    an already-decoded mapping.

    Args:
        event: The Lambda event.

    Returns:
        The decoded body, or an empty dict when there is no body.

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    if not event:
        return {}

    body = event.get("body")
    if not body:
        return {}

    if isinstance(body, Mapping):
        return dict(body)

    if isinstance(body, (bytes, str)) and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Request body is not valid base64") from exc

    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Request body must be valid JSON") from exc

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _describe_fields(fields: Sequence[str]) -> str:
    if len(fields) == 1:
        return f"{fields[0]} is required"
    return f"{', '.join(fields[:-1])} and {fields[-1]} are required"


def require_fields(body: Mapping[str, Any], fields: Sequence[str]) -> list[str]:
    """Return the values of required string fields, in order.

    Every field must be present and a non-empty string. The error message
    always names the full set of required fields.

    Raises:
        ValidationError: If any field is missing, empty or not a string.
    """
    values = []
    missing = []
    for field in fields:
        value = body.get(field)
        if not isinstance(value, str) or not value:
            missing.append(field)
        values.append(value)

    if missing:
        raise ValidationError(
            _describe_fields(fields),
            field=",".join(missing),
        )
    return values
