"""User model for authentication and content ownership."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from filmlog.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """A registered account.

    Username and email are unique case-insensitively; the repository
    compares lowered values before insert and the column constraints back
    that up for exact matches.

    Attributes:
        id: Unique identifier (UUID).
        username: Public handle.
        email: Login identity.
        hashed_password: Argon2 hashed password.
        is_active: Deactivated accounts cannot log in or refresh tokens.
        is_public: Whether the profile is visible to other users.
        last_login_at: Set asynchronously after each successful login.
    """

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )

    hashed_password: Mapped[str] = mapped_column(
        String(128),  # Argon2 hash length
        nullable=False,
    )

    display_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    email_verified: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(default=True, nullable=False)

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"
