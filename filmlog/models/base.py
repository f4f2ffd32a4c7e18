"""Declarative base, timestamp mixin and the portable JSON column type."""

import re
from datetime import datetime

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base; table names are derived from class names."""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        """ReviewLike -> review_likes, WatchlistEntry -> watchlist_entries."""
        snake_case = re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()
        if snake_case.endswith("y"):
            return snake_case[:-1] + "ies"
        return snake_case + "s"


class TimestampMixin:
    """Database-side created_at/updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
