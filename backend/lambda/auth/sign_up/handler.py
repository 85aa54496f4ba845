"""Lambda entrypoint for user sign up.

Creates the Cognito user and the PENDING profile row. USER_POOL_ID must
be set for a failed profile write to be rolled back in Cognito.
"""

from __future__ import annotations

from typing import Any, Mapping

from userauth.api.auth import sign_up_handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return sign_up_handler(event, context)
