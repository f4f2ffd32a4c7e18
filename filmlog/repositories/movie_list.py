"""List repository with query-time item counts."""

from typing import Any
from uuid import UUID

from sqlalchemy import Row, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.models.movie_list import ListItem, MovieList
from filmlog.repositories.base import BaseRepository


def item_count_column() -> Any:
    """Correlated count of items in the list from the outer query."""
    return (
        select(func.count(ListItem.id))
        .where(ListItem.list_id == MovieList.id)
        .correlate(MovieList)
        .scalar_subquery()
        .label("item_count")
    )


class MovieListRepository(BaseRepository[MovieList]):
    """Repository for lists and their items."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(MovieList, session)

    async def get_with_count(self, list_id: UUID) -> Row[Any] | None:
        """Get a list as a ``(MovieList, item_count)`` row."""
        result = await self.session.execute(
            select(MovieList, item_count_column())
            .where(MovieList.id == list_id)
            .execution_options(populate_existing=True)
        )
        return result.one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        include_private: bool,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Row[Any]]:
        """A user's lists with item counts, most recently updated first."""
        query = select(MovieList, item_count_column()).where(MovieList.user_id == user_id)
        if not include_private:
            query = query.where(MovieList.is_public.is_(True))
        result = await self.session.execute(
            query.order_by(MovieList.updated_at.desc(), MovieList.id).offset(offset).limit(limit)
        )
        return list(result.all())

    async def count_for_user(self, user_id: UUID, *, include_private: bool) -> int:
        criteria = [MovieList.user_id == user_id]
        if not include_private:
            criteria.append(MovieList.is_public.is_(True))
        return await self.count(*criteria)

    # ─────────────────────────────────────────────────────────────────────
    # Items
    # ─────────────────────────────────────────────────────────────────────

    async def get_items(self, list_id: UUID) -> list[ListItem]:
        """Items ordered by position, then most recently added."""
        result = await self.session.execute(
            select(ListItem)
            .where(ListItem.list_id == list_id)
            .order_by(ListItem.position.asc(), ListItem.added_at.desc(), ListItem.id)
        )
        return list(result.scalars().all())

    async def get_item(self, list_id: UUID, movie_id: UUID) -> ListItem | None:
        result = await self.session.execute(
            select(ListItem).where(ListItem.list_id == list_id, ListItem.movie_id == movie_id)
        )
        return result.scalar_one_or_none()

    async def max_position(self, list_id: UUID) -> int | None:
        result = await self.session.execute(
            select(func.max(ListItem.position)).where(ListItem.list_id == list_id)
        )
        return result.scalar_one()

    async def add_item(
        self,
        list_id: UUID,
        movie_id: UUID,
        *,
        position: int,
        notes: str | None = None,
    ) -> ListItem:
        item = ListItem(list_id=list_id, movie_id=movie_id, position=position, notes=notes)
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def remove_item(self, item: ListItem) -> None:
        await self.session.delete(item)
        await self.session.flush()
