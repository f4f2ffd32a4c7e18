"""Authentication schemas for request/response validation."""

from pydantic import Field

from filmlog.schemas.base import BaseSchema
from filmlog.schemas.user import UserRead


class LoginRequest(BaseSchema):
    """Schema for login request."""

    email: str = Field(..., examples=["alice@example.com"])
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseSchema):
    """Schema for token refresh request."""

    refresh_token: str = Field(..., min_length=1)


class AccessTokenResponse(BaseSchema):
    """A freshly minted access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class TokenResponse(AccessTokenResponse):
    """Access and refresh tokens."""

    refresh_token: str


class AuthResponse(BaseSchema):
    """Result of signup or login: the user and a token pair."""

    user: UserRead
    tokens: TokenResponse
