"""Review schemas for request/response validation."""

from datetime import date, datetime
from typing import Self
from uuid import UUID

from pydantic import Field, model_validator

from filmlog.schemas.base import BaseSchema
from filmlog.schemas.movie import MovieSummary
from filmlog.schemas.user import UserSummary


class MovieReference(BaseSchema):
    """Identifies a film by local id or by TMDB id (exactly one)."""

    movie_id: UUID | None = Field(default=None, description="Local movie id")
    tmdb_id: int | None = Field(default=None, ge=1, description="TMDB movie id")

    @model_validator(mode="after")
    def check_exactly_one_reference(self) -> Self:
        if (self.movie_id is None) == (self.tmdb_id is None):
            msg = "Provide exactly one of movie_id or tmdb_id"
            raise ValueError(msg)
        return self


class ReviewCreate(MovieReference):
    """Schema for creating a review.

    The rating grid (0.5 to 5.0 in half steps) and the 10000 character
    text limit are checked by the service.
    """

    rating: float | None = Field(default=None, examples=[4.5])
    review_text: str | None = None
    contains_spoilers: bool = False
    is_public: bool = True
    watched_date: date | None = None


class ReviewUpdate(BaseSchema):
    """Partial review update.

    Omitted fields keep their value; an explicit ``null`` clears a
    nullable field. Rating and text limits are checked by the
    service after ownership.
    """

    rating: float | None = None
    review_text: str | None = None
    contains_spoilers: bool | None = None
    is_public: bool | None = None
    watched_date: date | None = None


class ReviewRead(BaseSchema):
    """A review with its author, film and aggregated like data."""

    id: UUID
    user_id: UUID
    movie_id: UUID
    rating: float | None = None
    review_text: str | None = None
    contains_spoilers: bool
    is_public: bool
    watched_date: date | None = None
    like_count: int = 0
    user_has_liked: bool = False
    user: UserSummary
    movie: MovieSummary
    created_at: datetime
    updated_at: datetime


class LikeStatus(BaseSchema):
    """Like state of a review after a like/unlike."""

    review_id: UUID
    liked: bool
    like_count: int
