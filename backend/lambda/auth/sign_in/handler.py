"""Lambda entrypoint for password sign in.

Requires USER_PASSWORD_AUTH to be enabled on the Cognito app client.
"""

from __future__ import annotations

from typing import Any, Mapping

from userauth.api.auth import sign_in_handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return sign_in_handler(event, context)
