"""Movie repository, including the idempotent upsert used by the catalog."""

from typing import Any
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.models.movie import Movie
from filmlog.repositories.base import BaseRepository, like_pattern


class MovieRepository(BaseRepository[Movie]):
    """Repository for cached Movie rows."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Movie, session)

    async def get_by_tmdb_id(self, tmdb_id: int) -> Movie | None:
        """Get a cached movie by its TMDB id.

        Always re-reads the row so values written by a Core upsert are
        visible even if the instance is already in the identity map.
        """
        result = await self.session.execute(
            select(Movie)
            .where(Movie.tmdb_id == tmdb_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def _insert(self) -> Any:
        """Pick the dialect-specific INSERT that supports ON CONFLICT."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert
        return postgresql.insert

    async def upsert(self, values: dict[str, Any]) -> Movie:
        """Insert a movie or merge it into the existing row with the same tmdb_id.

        The statement is a single ``INSERT ... ON CONFLICT (tmdb_id) DO
        UPDATE``, so two writers racing on the same film both succeed and
        end up on one row. The row is read back by tmdb_id afterwards.

        Args:
            values: Column values; must include ``tmdb_id``.

        Returns:
            The persisted movie.
        """
        insert = self._insert()
        stmt = insert(Movie).values(id=uuid4(), **values)
        merged = {
            column: stmt.excluded[column]
            for column in values
            if column != "tmdb_id"
        }
        merged["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[Movie.tmdb_id],
            set_=merged,
        )
        await self.session.execute(stmt)

        movie = await self.get_by_tmdb_id(values["tmdb_id"])
        if movie is None:  # pragma: no cover - the row was just written
            msg = f"Upserted movie {values['tmdb_id']} could not be read back"
            raise RuntimeError(msg)
        return movie

    async def search_by_title(self, query: str, *, limit: int = 20) -> list[Movie]:
        """Case-insensitive substring search over cached titles and original titles."""
        pattern = like_pattern(query)
        result = await self.session.execute(
            select(Movie)
            .where(
                or_(
                    Movie.title.ilike(pattern, escape="\\"),
                    Movie.original_title.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Movie.popularity.desc().nulls_last(), Movie.title)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_popular(self, *, limit: int = 20) -> list[Movie]:
        """Cached movies ordered by TMDB popularity."""
        result = await self.session.execute(
            select(Movie).order_by(Movie.popularity.desc().nulls_last(), Movie.title).limit(limit)
        )
        return list(result.scalars().all())
