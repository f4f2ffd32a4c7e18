"""Review and review-like models."""

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmlog.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from filmlog.models.movie import Movie
    from filmlog.models.user import User


class Review(Base, TimestampMixin):
    """A user's rating and/or write-up of a film.

    At most one review exists per (user, movie). The like count is never
    stored here; it is counted from ``review_likes`` when read.
    """

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_reviews_user_movie"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 0.5 AND rating <= 5.0 "
            "AND rating * 2 = CAST(rating * 2 AS INTEGER))",
            name="ck_reviews_rating_half_steps",
        ),
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

    rating: Mapped[float | None] = mapped_column(
        Numeric(2, 1, asdecimal=False),
        nullable=True,
    )
    review_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    contains_spoilers: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_public: Mapped[bool] = mapped_column(default=True, nullable=False)
    watched_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="joined")
    movie: Mapped["Movie"] = relationship("Movie", lazy="joined")

    def __repr__(self) -> str:
        return f"<Review {self.user_id}:{self.movie_id} rating={self.rating}>"


class ReviewLike(Base):
    """One user's like on one review."""

    __table_args__ = (
        UniqueConstraint("user_id", "review_id", name="uq_review_likes_user_review"),
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

    review_id: Mapped[UUID] = mapped_column(
        ForeignKey("reviews.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
