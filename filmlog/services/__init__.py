"""Service layer for business logic."""

from filmlog.services.auth import AuthService
from filmlog.services.catalog import CatalogResolver
from filmlog.services.movie_list import ListService
from filmlog.services.review import ReviewService
from filmlog.services.watchlist import WatchlistService

__all__ = [
    "AuthService",
    "CatalogResolver",
    "ListService",
    "ReviewService",
    "WatchlistService",
]
