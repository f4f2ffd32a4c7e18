"""User schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from filmlog.schemas.base import BaseSchema


class UserCreate(BaseSchema):
    """Schema for user registration.

    Format rules (handle pattern, email shape, password length) are
    enforced by the credential service so they apply to every caller.
    """

    username: str = Field(..., description="Public handle", examples=["alice"])
    email: str = Field(..., description="Login email", examples=["alice@example.com"])
    password: str = Field(..., description="At least 8 characters", examples=["correct-horse"])
    display_name: str | None = Field(default=None, examples=["Alice"])


class UserUpdate(BaseSchema):
    """Partial profile update. Only fields present in the body are applied."""

    display_name: str | None = Field(default=None, max_length=50)
    bio: str | None = Field(default=None, max_length=2000)
    avatar_url: str | None = Field(default=None, max_length=500)
    is_public: bool | None = None


class UserSummary(BaseSchema):
    """Author information embedded in reviews and lists."""

    id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


class UserPublic(UserSummary):
    """Profile as shown to other users."""

    bio: str | None = None
    is_public: bool
    created_at: datetime


class UserRead(UserPublic):
    """The account owner's own profile."""

    email: str
    email_verified: bool
    is_active: bool
    last_login_at: datetime | None = None
    updated_at: datetime
