"""Repository layer for database access."""

from filmlog.repositories.base import BaseRepository
from filmlog.repositories.movie import MovieRepository
from filmlog.repositories.movie_list import MovieListRepository
from filmlog.repositories.review import ReviewRepository
from filmlog.repositories.user import UserRepository
from filmlog.repositories.watchlist import WatchlistRepository

__all__ = [
    "BaseRepository",
    "MovieListRepository",
    "MovieRepository",
    "ReviewRepository",
    "UserRepository",
    "WatchlistRepository",
]
