"""SQLAlchemy models."""

from filmlog.models.base import Base, TimestampMixin
from filmlog.models.movie import Movie
from filmlog.models.movie_list import ListItem, MovieList
from filmlog.models.review import Review, ReviewLike
from filmlog.models.user import User
from filmlog.models.watchlist import WatchlistEntry

__all__ = [
    "Base",
    "ListItem",
    "Movie",
    "MovieList",
    "Review",
    "ReviewLike",
    "TimestampMixin",
    "User",
    "WatchlistEntry",
]
