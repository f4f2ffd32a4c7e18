"""Watchlist service."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.core.exceptions import ConflictError, ErrorCode, NotFoundError
from filmlog.models.watchlist import WatchlistEntry
from filmlog.repositories.watchlist import WatchlistRepository
from filmlog.schemas.base import PaginatedResponse
from filmlog.schemas.movie import MovieSummary
from filmlog.schemas.watchlist import WatchlistAdd, WatchlistEntryRead
from filmlog.services.catalog import CatalogResolver

DUPLICATE_ENTRY_MESSAGE = "Movie already in watchlist"


class WatchlistService:
    """Service for a user's watchlist. Entries are only added or removed."""

    def __init__(self, session: AsyncSession, catalog: CatalogResolver) -> None:
        self.session = session
        self.catalog = catalog
        self.repository = WatchlistRepository(session)

    async def add(self, user_id: UUID, data: WatchlistAdd) -> WatchlistEntryRead:
        movie = await self.catalog.get_or_resolve(movie_id=data.movie_id, tmdb_id=data.tmdb_id)

        if await self.repository.get_entry(user_id, movie.id) is not None:
            raise ConflictError(message=DUPLICATE_ENTRY_MESSAGE)

        try:
            entry = await self.repository.create(user_id=user_id, movie_id=movie.id)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(message=DUPLICATE_ENTRY_MESSAGE) from None

        return self._to_read_schema(entry)

    async def remove(self, user_id: UUID, movie_id: UUID) -> None:
        entry = await self.repository.get_entry(user_id, movie_id)
        if entry is None:
            raise NotFoundError(
                message="Movie not found in watchlist",
                code=ErrorCode.WATCHLIST_ENTRY_NOT_FOUND,
            )
        await self.repository.delete(entry)

    async def list(
        self,
        user_id: UUID,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[WatchlistEntryRead]:
        """The user's watchlist, newest first."""
        offset = (page - 1) * limit
        entries = await self.repository.list_for_user(user_id, offset=offset, limit=limit)
        total = await self.repository.count_for_user(user_id)
        return PaginatedResponse.create(
            items=[self._to_read_schema(entry) for entry in entries],
            total=total,
            page=page,
            limit=limit,
        )

    async def contains(self, user_id: UUID, movie_id: UUID) -> bool:
        return await self.repository.get_entry(user_id, movie_id) is not None

    async def count(self, user_id: UUID) -> int:
        return await self.repository.count_for_user(user_id)

    @staticmethod
    def _to_read_schema(entry: WatchlistEntry) -> WatchlistEntryRead:
        return WatchlistEntryRead(
            id=entry.id,
            movie_id=entry.movie_id,
            added_at=entry.added_at,
            movie=MovieSummary.model_validate(entry.movie),
        )
