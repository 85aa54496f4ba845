"""DynamoDB-backed store for user profiles.

Profiles are keyed by a generated ``userId`` and looked up by email
through a global secondary index. The identity provider remains the
system of record for credentials; this table only mirrors the profile
and its confirmation status.
"""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Optional
from uuid import uuid4

from boto3.dynamodb.conditions import Attr
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from userauth.config import Settings
from userauth.config import get_settings
from userauth.exceptions import DatabaseError
from userauth.exceptions import ValidationError
from userauth.services.aws_clients import get_dynamodb_table
from userauth.store.models import ProfileRef
from userauth.store.models import UserProfile
from userauth.store.models import UserStatus
from userauth.utils.logging import get_logger
from userauth.utils.logging import mask_email

logger = get_logger(__name__)


class UserStore:
    """Profile operations against the users table.

    Args:
        table: A boto3 DynamoDB ``Table`` resource.
        email_index: Name of the secondary index on ``email``.
    """

    def __init__(self, table: Any, email_index: str):
        self._table = table
        self._email_index = email_index

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "UserStore":
        """Build a store for the configured table."""
        settings = settings or get_settings()
        table = get_dynamodb_table(
            settings.require_users_table(),
            region_name=settings.region,
        )
        return cls(table, settings.users_email_index)

    def find_by_email(self, email: str) -> Optional[ProfileRef]:
        """Look up a profile by email.

        Only the first match is consulted; the index does not enforce
        uniqueness.

        Returns:
            The profile id and status, or None if no profile exists.
        """
        if not email:
            raise ValidationError("email is required", field="email")

        try:
            response = self._table.query(
                IndexName=self._email_index,
                KeyConditionExpression=Key("email").eq(email),
                ProjectionExpression="userId, #status",
                ExpressionAttributeNames={"#status": "status"},
                Limit=1,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                f"Profile lookup failed for {mask_email(email)}",
                exc_info=True,
            )
            raise DatabaseError("Failed to look up user profile", detail=str(exc)) from exc

        items = response.get("Items") or []
        if not items:
            return None
        item = items[0]
        return ProfileRef(
            user_id=item["userId"],
            status=item.get("status") or UserStatus.PENDING,
        )

    def create(self, email: str, full_name: str) -> UserProfile:
        """Write a new PENDING profile.

        The write is guarded on ``userId`` so it can never overwrite an
        existing row.
        """
        if not email or not full_name:
            raise ValidationError("email and fullName are required")

        profile = UserProfile(
            user_id=str(uuid4()),
            email=email,
            full_name=full_name,
            status=UserStatus.PENDING,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        try:
            self._table.put_item(
                Item=profile.to_item(),
                ConditionExpression=Attr("userId").not_exists(),
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            logger.error(
                f"Profile write failed for {mask_email(email)}",
                extra={"error_code": code},
                exc_info=True,
            )
            raise DatabaseError("Failed to create user profile", detail=code) from exc
        except BotoCoreError as exc:
            logger.error(
                f"Profile write failed for {mask_email(email)}",
                exc_info=True,
            )
            raise DatabaseError("Failed to create user profile", detail=str(exc)) from exc

        logger.info(
            f"Created profile for {mask_email(email)}",
            extra={"user_id": profile.user_id},
        )
        return profile

    def set_confirmed_by_email(self, email: str) -> Optional[ProfileRef]:
        """Mark the profile for ``email`` as CONFIRMED.

        Returns:
            The updated profile reference, or None when no profile exists
            for the email. The update requires the row to exist.
        """
        if not email:
            raise ValidationError("email is required", field="email")

        existing = self.find_by_email(email)
        if existing is None:
            return None

        try:
            self._table.update_item(
                Key={"userId": existing.user_id},
                UpdateExpression="SET #status = :confirmed",
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={":confirmed": UserStatus.CONFIRMED.value},
                ConditionExpression=Attr("userId").exists(),
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                f"Profile confirmation failed for {mask_email(email)}",
                extra={"user_id": existing.user_id},
                exc_info=True,
            )
            raise DatabaseError("Failed to confirm user profile", detail=str(exc)) from exc

        return ProfileRef(user_id=existing.user_id, status=UserStatus.CONFIRMED)
