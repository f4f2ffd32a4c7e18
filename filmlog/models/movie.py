"""Locally cached film metadata."""

from datetime import date
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, Date, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from filmlog.models.base import Base, JSONType, TimestampMixin


class Movie(Base, TimestampMixin):
    """A film copied from TMDB.

    ``tmdb_id`` is the provider's identifier; every other table references
    the local ``id`` instead. Rows are only written by the catalog
    resolver's upsert.
    """

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
    )

    tmdb_id: Mapped[int] = mapped_column(
        unique=True,
        index=True,
        nullable=False,
    )
    imdb_id: Mapped[str | None] = mapped_column(String(20), nullable=True)

    title: Mapped[str] = mapped_column(String(500), index=True, nullable=False)
    original_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    tagline: Mapped[str | None] = mapped_column(String(500), nullable=True)

    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    runtime: Mapped[int | None] = mapped_column(nullable=True)

    poster_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    backdrop_path: Mapped[str | None] = mapped_column(String(255), nullable=True)

    vote_average: Mapped[float | None] = mapped_column(
        Numeric(3, 1, asdecimal=False),
        nullable=True,
    )
    vote_count: Mapped[int | None] = mapped_column(nullable=True)
    popularity: Mapped[float | None] = mapped_column(
        Numeric(10, 3, asdecimal=False),
        index=True,
        nullable=True,
    )

    genres: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    production_companies: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONType, nullable=True
    )
    production_countries: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONType, nullable=True
    )
    spoken_languages: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONType, nullable=True
    )

    status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    budget: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    revenue: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    original_language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    adult: Mapped[bool] = mapped_column(default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Movie {self.tmdb_id} {self.title!r}>"
