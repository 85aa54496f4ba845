"""User profile models for the DynamoDB users table."""

from __future__ import annotations

import enum
from typing import Any
from typing import Mapping

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class UserStatus(str, enum.Enum):
    """Lifecycle status of a user profile."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"


class ProfileRef(BaseModel):
    """Identifier and status of a stored profile."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    status: UserStatus


class UserProfile(BaseModel):
    """A persisted user profile."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    email: str
    full_name: str = Field(alias="fullName")
    status: UserStatus = UserStatus.PENDING
    created_at: str = Field(alias="createdAt")

    def to_item(self) -> dict[str, Any]:
        """Return the DynamoDB item for this profile."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "UserProfile":
        return cls.model_validate(dict(item))
