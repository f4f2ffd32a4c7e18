"""Watchlist schemas."""

from datetime import datetime
from uuid import UUID

from filmlog.schemas.base import BaseSchema
from filmlog.schemas.movie import MovieSummary
from filmlog.schemas.review import MovieReference


class WatchlistAdd(MovieReference):
    """Add a film to the current user's watchlist."""


class WatchlistEntryRead(BaseSchema):
    id: UUID
    movie_id: UUID
    added_at: datetime
    movie: MovieSummary


class WatchlistStatus(BaseSchema):
    movie_id: UUID
    in_watchlist: bool


class WatchlistCount(BaseSchema):
    count: int
