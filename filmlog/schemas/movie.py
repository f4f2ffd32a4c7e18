"""Movie schemas for catalog responses."""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from filmlog.schemas.base import BaseSchema


class MovieSummary(BaseSchema):
    """Compact cached-movie representation embedded in other resources."""

    id: UUID
    tmdb_id: int
    title: str
    release_date: date | None = None
    poster_path: str | None = None


class MovieRead(MovieSummary):
    """A cached movie with its full metadata."""

    imdb_id: str | None = None
    original_title: str | None = None
    overview: str | None = None
    tagline: str | None = None
    runtime: int | None = None
    backdrop_path: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    popularity: float | None = None
    genres: list[dict[str, Any]] | None = None
    production_companies: list[dict[str, Any]] | None = None
    production_countries: list[dict[str, Any]] | None = None
    spoken_languages: list[dict[str, Any]] | None = None
    status: str | None = None
    budget: int | None = None
    revenue: int | None = None
    original_language: str | None = None
    adult: bool = False
    created_at: datetime
    updated_at: datetime


class ProviderMovie(BaseSchema):
    """A TMDB listing result. Not persisted, so it has no local id."""

    tmdb_id: int
    title: str
    original_title: str | None = None
    overview: str | None = None
    release_date: date | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    popularity: float | None = None
    adult: bool = False
    genre_ids: list[int] = Field(default_factory=list)
    original_language: str | None = None


class ProviderPage(BaseSchema):
    """A page of TMDB results."""

    page: int
    total_pages: int
    total_results: int
    results: list[ProviderMovie]
