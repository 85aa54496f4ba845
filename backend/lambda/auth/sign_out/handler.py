"""Lambda entrypoint for global sign out."""

from __future__ import annotations

from typing import Any, Mapping

from userauth.api.auth import sign_out_handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return sign_out_handler(event, context)
