"""Watchlist entries."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmlog.models.base import Base

if TYPE_CHECKING:
    from filmlog.models.movie import Movie


class WatchlistEntry(Base):
    """A film a user wants to watch. Add or remove only."""

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_watchlist_entries_user_movie"),
    )

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    movie_id: Mapped[UUID] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    movie: Mapped["Movie"] = relationship("Movie", lazy="joined")
