"""Generic async CRUD repository shared by the model repositories."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


def like_pattern(term: str) -> str:
    """Build a ``%term%`` pattern with LIKE wildcards escaped (escape char ``\\``)."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BaseRepository(Generic[ModelType]):
    """CRUD helpers for one model class.

    Writes only flush; committing is left to the session owner
    (``get_db`` for HTTP requests).

    Attributes:
        model: Mapped class the repository reads and writes.
        session: Session owned by the caller.
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def create(self, **kwargs: Any) -> ModelType:
        """Insert a row and return it with server defaults loaded.

        Raises:
            sqlalchemy.exc.IntegrityError: If a unique or foreign key
                constraint rejects the row.
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get_by_id(self, entity_id: UUID) -> ModelType | None:
        """Get an entity by its ID."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def update(self, instance: ModelType, **fields: Any) -> ModelType:
        """Apply the given fields to an entity.

        Only the keys passed are touched. With no fields this is a no-op
        that returns the entity unchanged.
        """
        if not fields:
            return instance
        for key, value in fields.items():
            setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Delete an entity."""
        await self.session.delete(instance)
        await self.session.flush()

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        """Count entities matching the given criteria."""
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(*criteria)
        )
        return result.scalar_one()

    async def exists(self, *criteria: ColumnElement[bool]) -> bool:
        """Check whether any entity matches the given criteria."""
        return await self.count(*criteria) > 0
