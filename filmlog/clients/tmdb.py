"""Async HTTP client for The Movie Database (TMDB) v3 API.

Exception hierarchy:
    TMDBError (base, keeps the HTTP status code when there is one)
    ├── TMDBAuthenticationError  - 401, bad or missing API key
    ├── TMDBNotFoundError        - 404, unknown movie id
    ├── TMDBServerError          - 5xx and any other non-2xx reply
    └── TMDBNetworkError         - connection failures, timeouts

The client does no retrying; timeouts are enforced by httpx.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx

from filmlog.core.logging import get_logger

logger = get_logger("tmdb")

DETAIL_APPEND = "credits,videos,images"
TRENDING_WINDOWS = frozenset({"day", "week"})


class TMDBError(Exception):
    """Base exception for TMDB API errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)


class TMDBAuthenticationError(TMDBError):
    """TMDB rejected the API key."""


class TMDBNotFoundError(TMDBError):
    """The requested resource does not exist at TMDB."""


class TMDBServerError(TMDBError):
    """TMDB answered with an error status."""


class TMDBNetworkError(TMDBError):
    """TMDB could not be reached."""


def exception_from_response(status_code: int, response_data: dict[str, Any]) -> TMDBError:
    """Create the appropriate exception from an HTTP error response.

    Args:
        status_code: HTTP status code.
        response_data: Parsed JSON body (TMDB uses ``status_message``).

    Returns:
        The matching TMDBError subclass.
    """
    message = str(response_data.get("status_message") or f"HTTP {status_code}")
    exception_map: dict[int, type[TMDBError]] = {
        401: TMDBAuthenticationError,
        404: TMDBNotFoundError,
    }
    exception_class = exception_map.get(status_code, TMDBServerError)
    return exception_class(message, status_code=status_code, response_data=response_data)


def parse_date(value: str | None) -> date | None:
    """Parse TMDB's ``YYYY-MM-DD`` dates; empty strings mean unknown."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def basic_movie(raw: dict[str, Any]) -> dict[str, Any]:
    """Reduce a TMDB list result to the fields exposed by listing endpoints."""
    return {
        "tmdb_id": raw["id"],
        "title": raw.get("title") or "",
        "original_title": raw.get("original_title"),
        "overview": raw.get("overview"),
        "release_date": parse_date(raw.get("release_date")),
        "poster_path": raw.get("poster_path"),
        "backdrop_path": raw.get("backdrop_path"),
        "vote_average": raw.get("vote_average"),
        "vote_count": raw.get("vote_count"),
        "popularity": raw.get("popularity"),
        "adult": bool(raw.get("adult", False)),
        "genre_ids": raw.get("genre_ids") or [],
        "original_language": raw.get("original_language"),
    }


def movie_columns(details: dict[str, Any]) -> dict[str, Any]:
    """Map a TMDB movie-details payload onto ``movies`` table columns."""
    return {
        "tmdb_id": details["id"],
        "imdb_id": details.get("imdb_id") or None,
        "title": details.get("title") or "",
        "original_title": details.get("original_title"),
        "overview": details.get("overview"),
        "tagline": details.get("tagline") or None,
        "release_date": parse_date(details.get("release_date")),
        "runtime": details.get("runtime"),
        "poster_path": details.get("poster_path"),
        "backdrop_path": details.get("backdrop_path"),
        "vote_average": details.get("vote_average"),
        "vote_count": details.get("vote_count"),
        "popularity": details.get("popularity"),
        "genres": details.get("genres") or [],
        "production_companies": details.get("production_companies") or [],
        "production_countries": details.get("production_countries") or [],
        "spoken_languages": details.get("spoken_languages") or [],
        "status": details.get("status"),
        "budget": details.get("budget"),
        "revenue": details.get("revenue"),
        "original_language": details.get("original_language"),
        "adult": bool(details.get("adult", False)),
    }


def shape_page(payload: dict[str, Any]) -> dict[str, Any]:
    """Convert a TMDB paged response into ``{page, total_pages, total_results, results}``."""
    return {
        "page": payload.get("page", 1),
        "total_pages": payload.get("total_pages", 0),
        "total_results": payload.get("total_results", 0),
        "results": [basic_movie(item) for item in payload.get("results", [])],
    }


class TMDBClient:
    """Thin async wrapper around the TMDB REST API.

    One instance is shared for the application's lifetime; call
    :meth:`aclose` on shutdown.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            params={"api_key": api_key, "language": language},
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        logger.debug("TMDB request", extra={"path": path})
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("TMDB unreachable", extra={"path": path, "error": repr(exc)})
            raise TMDBNetworkError(f"Failed to reach TMDB: {exc}") from exc

        if response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if not isinstance(payload, dict):
                logger.warning(
                    "TMDB returned a malformed body",
                    extra={"path": path, "status_code": response.status_code},
                )
                raise TMDBServerError("TMDB returned a malformed response")
            return payload

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        logger.warning(
            "TMDB error response",
            extra={"path": path, "status_code": response.status_code},
        )
        raise exception_from_response(response.status_code, data)

    async def get_movie_details(self, tmdb_id: int) -> dict[str, Any]:
        """Full movie record including credits, videos and images."""
        return await self._get(
            f"/movie/{tmdb_id}",
            {"append_to_response": DETAIL_APPEND},
        )

    async def search_movies(
        self,
        query: str,
        *,
        page: int = 1,
        include_adult: bool = False,
    ) -> dict[str, Any]:
        payload = await self._get(
            "/search/movie",
            {"query": query, "page": page, "include_adult": str(include_adult).lower()},
        )
        return shape_page(payload)

    async def get_popular(self, *, page: int = 1) -> dict[str, Any]:
        return shape_page(await self._get("/movie/popular", {"page": page}))

    async def get_top_rated(self, *, page: int = 1) -> dict[str, Any]:
        return shape_page(await self._get("/movie/top_rated", {"page": page}))

    async def get_now_playing(self, *, page: int = 1) -> dict[str, Any]:
        return shape_page(await self._get("/movie/now_playing", {"page": page}))

    async def get_upcoming(self, *, page: int = 1) -> dict[str, Any]:
        return shape_page(await self._get("/movie/upcoming", {"page": page}))

    async def get_trending(self, time_window: str = "week", *, page: int = 1) -> dict[str, Any]:
        """Trending movies for ``day`` or ``week``.

        Raises:
            ValueError: If ``time_window`` is not ``day`` or ``week``.
        """
        if time_window not in TRENDING_WINDOWS:
            msg = "time_window must be 'day' or 'week'"
            raise ValueError(msg)
        return shape_page(await self._get(f"/trending/movie/{time_window}", {"page": page}))
