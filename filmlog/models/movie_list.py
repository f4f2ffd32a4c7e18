"""User-curated lists of films."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmlog.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from filmlog.models.movie import Movie
    from filmlog.models.user import User


class MovieList(Base, TimestampMixin):
    """A named collection of films owned by one user.

    Attributes:
        is_public: Private lists are only visible to their owner.
        is_ranked: When set, item ``position`` carries the ranking.
    """

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_ranked: Mapped[bool] = mapped_column(default=False, nullable=False)

    user: Mapped["User"] = relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return f"<MovieList {self.name}>"


class ListItem(Base):
    """A film's membership in a list.

    ``position`` is 0 in unranked lists. In ranked lists it is assigned
    as max + 1 on insert and never renumbered, so gaps can appear after
    removals.
    """

    __table_args__ = (UniqueConstraint("list_id", "movie_id", name="uq_list_items_list_movie"),)

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
    )

    list_id: Mapped[UUID] = mapped_column(
        ForeignKey("movie_lists.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    movie_id: Mapped[UUID] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    position: Mapped[int] = mapped_column(default=0, server_default="0", nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    movie: Mapped["Movie"] = relationship("Movie", lazy="joined")
