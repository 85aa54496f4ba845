"""Pydantic schemas for auth API responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from userauth.store.models import UserProfile


class MessageResponse(BaseModel):
    """Response carrying only a status message."""

    message: str


class SignUpResponse(BaseModel):
    """Successful sign-up response."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    user_confirmed: bool = Field(alias="userConfirmed")
    user_sub: str = Field(alias="userSub")
    user: UserProfile


class SignInResponse(BaseModel):
    """Successful sign-in response with the issued tokens."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    access_token: str = Field(alias="accessToken")
    id_token: Optional[str] = Field(default=None, alias="idToken")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    expires_in: Optional[int] = Field(default=None, alias="expiresIn")
    token_type: Optional[str] = Field(default=None, alias="tokenType")
