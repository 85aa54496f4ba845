"""Lambda entrypoint for email confirmation."""

from __future__ import annotations

from typing import Any, Mapping

from userauth.api.auth import confirm_email_handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return confirm_email_handler(event, context)
