"""Catalog resolver: cache-aside access to TMDB movie metadata."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.clients.tmdb import (
    TRENDING_WINDOWS,
    TMDBClient,
    TMDBError,
    TMDBNotFoundError,
    movie_columns,
)
from filmlog.core.exceptions import (
    ErrorCode,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from filmlog.core.logging import get_logger
from filmlog.models.movie import Movie
from filmlog.repositories.movie import MovieRepository
from filmlog.schemas.movie import ProviderPage

logger = get_logger("catalog")


def _movie_not_found(tmdb_id: Any) -> NotFoundError:
    return NotFoundError(resource="Movie", resource_id=tmdb_id, code=ErrorCode.MOVIE_NOT_FOUND)


class CatalogResolver:
    """Resolves films against the local cache, falling back to TMDB.

    Only :meth:`resolve` writes to the database. The listing methods proxy
    TMDB directly and persist nothing.
    """

    def __init__(self, session: AsyncSession, client: TMDBClient) -> None:
        self.session = session
        self.client = client
        self.repository = MovieRepository(session)

    async def resolve(self, tmdb_id: int) -> Movie:
        """Return the cached movie for a TMDB id, fetching and storing it on a miss.

        Cached rows are returned as-is without any freshness check.

        Raises:
            NotFoundError: TMDB does not know the id.
            UpstreamUnavailableError: TMDB is unreachable or erroring.
        """
        movie = await self.repository.get_by_tmdb_id(tmdb_id)
        if movie is not None:
            logger.debug("Catalog cache hit", extra={"tmdb_id": tmdb_id})
            return movie

        logger.debug("Catalog cache miss", extra={"tmdb_id": tmdb_id})
        try:
            details = await self.client.get_movie_details(tmdb_id)
        except TMDBError as exc:
            raise self._translate(exc, tmdb_id) from exc

        movie = await self.repository.upsert(movie_columns(details))
        logger.info(
            "Cached movie from TMDB",
            extra={"tmdb_id": tmdb_id, "movie_id": str(movie.id)},
        )
        return movie

    async def get_movie(self, movie_id: UUID) -> Movie:
        """Look up a cached movie by its local id."""
        movie = await self.repository.get_by_id(movie_id)
        if movie is None:
            raise _movie_not_found(movie_id)
        return movie

    async def get_or_resolve(self, *, movie_id: UUID | None, tmdb_id: int | None) -> Movie:
        """Return the movie for whichever reference the caller supplied."""
        if movie_id is not None:
            return await self.get_movie(movie_id)
        if tmdb_id is not None:
            return await self.resolve(tmdb_id)
        raise ValidationError.for_field("movie_id", "A movie reference is required")

    async def search_local(self, query: str, *, limit: int = 20) -> list[Movie]:
        query = query.strip()
        if not query:
            raise ValidationError.for_field("query", "Search query is required")
        return await self.repository.search_by_title(query, limit=limit)

    async def popular_local(self, *, limit: int = 20) -> list[Movie]:
        return await self.repository.list_popular(limit=limit)

    # ─────────────────────────────────────────────────────────────────────
    # Pass-through listings (not cached)
    # ─────────────────────────────────────────────────────────────────────

    async def search(self, query: str, *, page: int = 1, include_adult: bool = False) -> ProviderPage:
        query = query.strip()
        if not query:
            raise ValidationError.for_field("query", "Search query is required")
        return await self._page(self.client.search_movies(query, page=page, include_adult=include_adult))

    async def popular(self, *, page: int = 1) -> ProviderPage:
        return await self._page(self.client.get_popular(page=page))

    async def top_rated(self, *, page: int = 1) -> ProviderPage:
        return await self._page(self.client.get_top_rated(page=page))

    async def now_playing(self, *, page: int = 1) -> ProviderPage:
        return await self._page(self.client.get_now_playing(page=page))

    async def upcoming(self, *, page: int = 1) -> ProviderPage:
        return await self._page(self.client.get_upcoming(page=page))

    async def trending(self, time_window: str = "week", *, page: int = 1) -> ProviderPage:
        if time_window not in TRENDING_WINDOWS:
            raise ValidationError.for_field("time_window", "time_window must be 'day' or 'week'")
        return await self._page(self.client.get_trending(time_window, page=page))

    async def _page(self, call: Any) -> ProviderPage:
        try:
            payload = await call
        except TMDBError as exc:
            raise self._translate(exc) from exc
        return ProviderPage.model_validate(payload)

    @staticmethod
    def _translate(exc: TMDBError, tmdb_id: int | None = None) -> Exception:
        """Map a TMDB failure to NotFound (404 upstream) or UpstreamUnavailable."""
        if isinstance(exc, TMDBNotFoundError):
            return _movie_not_found(tmdb_id)
        return UpstreamUnavailableError(
            "Movie provider request failed",
            upstream_status=exc.status_code,
        )
