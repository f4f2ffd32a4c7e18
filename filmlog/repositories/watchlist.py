"""Watchlist repository for database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.models.watchlist import WatchlistEntry
from filmlog.repositories.base import BaseRepository


class WatchlistRepository(BaseRepository[WatchlistEntry]):
    """Repository for WatchlistEntry operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(WatchlistEntry, session)

    async def get_entry(self, user_id: UUID, movie_id: UUID) -> WatchlistEntry | None:
        result = await self.session.execute(
            select(WatchlistEntry).where(
                WatchlistEntry.user_id == user_id,
                WatchlistEntry.movie_id == movie_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> list[WatchlistEntry]:
        """A user's watchlist, most recently added first."""
        result = await self.session.execute(
            select(WatchlistEntry)
            .where(WatchlistEntry.user_id == user_id)
            .order_by(WatchlistEntry.added_at.desc(), WatchlistEntry.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(self, user_id: UUID) -> int:
        return await self.count(WatchlistEntry.user_id == user_id)
