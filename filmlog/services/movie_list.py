"""List service: user-curated and ranked film lists."""

from typing import Any
from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.core.exceptions import AuthorizationError, ConflictError, ErrorCode, NotFoundError
from filmlog.core.validation import (
    validate_list_description,
    validate_list_name,
    validate_list_notes,
)
from filmlog.models.movie_list import MovieList
from filmlog.repositories.movie_list import MovieListRepository
from filmlog.repositories.user import UserRepository
from filmlog.schemas.base import PaginatedResponse
from filmlog.schemas.movie import MovieSummary
from filmlog.schemas.movie_list import (
    ListCreate,
    ListDetail,
    ListItemCreate,
    ListItemRead,
    ListRead,
    ListUpdate,
)
from filmlog.schemas.user import UserSummary
from filmlog.services.catalog import CatalogResolver

DUPLICATE_ITEM_MESSAGE = "Movie already in this list"


def _list_not_found(list_id: UUID) -> NotFoundError:
    return NotFoundError(resource="List", resource_id=list_id, code=ErrorCode.LIST_NOT_FOUND)


class ListService:
    """Service for list business logic.

    Positions in ranked lists are allocated as one past the current
    maximum and are not renumbered when items are removed.
    """

    def __init__(self, session: AsyncSession, catalog: CatalogResolver) -> None:
        self.session = session
        self.catalog = catalog
        self.repository = MovieListRepository(session)
        self.user_repository = UserRepository(session)

    async def create(self, user_id: UUID, data: ListCreate) -> ListRead:
        """Create a list.

        Raises:
            ValidationError: Name is empty after trimming.
        """
        name = validate_list_name(data.name)
        movie_list = await self.repository.create(
            user_id=user_id,
            name=name,
            description=validate_list_description(data.description),
            is_public=data.is_public,
            is_ranked=data.is_ranked,
        )
        return await self._read(movie_list.id)

    async def get(self, list_id: UUID, viewer_id: UUID | None = None) -> ListDetail:
        """Get a list with its items.

        Private lists are reported as not found to anyone but the owner.
        """
        row = await self.repository.get_with_count(list_id)
        if row is None or not self._visible(row.MovieList, viewer_id):
            raise _list_not_found(list_id)

        items = await self.repository.get_items(list_id)
        return ListDetail(
            **self._to_read_schema(row).model_dump(),
            items=[
                ListItemRead(
                    id=item.id,
                    movie_id=item.movie_id,
                    position=item.position,
                    notes=item.notes,
                    added_at=item.added_at,
                    movie=MovieSummary.model_validate(item.movie),
                )
                for item in items
            ],
        )

    async def list_by_user(
        self,
        username: str,
        viewer_id: UUID | None = None,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[ListRead]:
        """A user's lists. Private ones are included only for the owner."""
        owner = await self.user_repository.get_by_username(username)
        if owner is None:
            raise NotFoundError(resource="User", code=ErrorCode.USER_NOT_FOUND)

        include_private = owner.id == viewer_id
        offset = (page - 1) * limit
        rows = await self.repository.list_for_user(
            owner.id,
            include_private=include_private,
            offset=offset,
            limit=limit,
        )
        total = await self.repository.count_for_user(owner.id, include_private=include_private)
        return PaginatedResponse.create(
            items=[self._to_read_schema(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    async def update(self, list_id: UUID, user_id: UUID, data: ListUpdate) -> ListRead:
        """Apply a partial update to the user's own list.

        Raises:
            NotFoundError: No such list.
            AuthorizationError: The list belongs to someone else.
            ValidationError: Name supplied but empty, or a field is too long.
        """
        movie_list = await self._get_owned(list_id, user_id)

        fields: dict[str, Any] = data.model_dump(exclude_unset=True)
        if "name" in fields:
            fields["name"] = validate_list_name(fields["name"])
        if "description" in fields:
            fields["description"] = validate_list_description(fields["description"])
        for flag in ("is_public", "is_ranked"):
            if flag in fields and fields[flag] is None:
                fields.pop(flag)

        await self.repository.update(movie_list, **fields)
        return await self._read(list_id)

    async def delete(self, list_id: UUID, user_id: UUID) -> None:
        movie_list = await self._get_owned(list_id, user_id)
        await self.repository.delete(movie_list)

    # ─────────────────────────────────────────────────────────────────────
    # Items
    # ─────────────────────────────────────────────────────────────────────

    async def add_item(self, list_id: UUID, user_id: UUID, data: ListItemCreate) -> ListItemRead:
        """Add a film to the user's own list.

        Raises:
            NotFoundError: List or film missing.
            AuthorizationError: The list belongs to someone else.
            ValidationError: Notes are too long.
            ConflictError: The film is already in the list.
        """
        movie_list = await self._get_owned(list_id, user_id)
        notes = validate_list_notes(data.notes)
        movie = await self.catalog.get_or_resolve(movie_id=data.movie_id, tmdb_id=data.tmdb_id)

        if await self.repository.get_item(list_id, movie.id) is not None:
            raise ConflictError(message=DUPLICATE_ITEM_MESSAGE)

        position = 0
        if movie_list.is_ranked:
            position = (await self.repository.max_position(list_id) or 0) + 1

        try:
            item = await self.repository.add_item(
                list_id,
                movie.id,
                position=position,
                notes=notes,
            )
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(message=DUPLICATE_ITEM_MESSAGE) from None

        return ListItemRead(
            id=item.id,
            movie_id=item.movie_id,
            position=item.position,
            notes=item.notes,
            added_at=item.added_at,
            movie=MovieSummary.model_validate(movie),
        )

    async def remove_item(self, list_id: UUID, movie_id: UUID, user_id: UUID) -> None:
        """Remove a film from the user's own list. Remaining positions are kept as-is."""
        await self._get_owned(list_id, user_id)
        item = await self.repository.get_item(list_id, movie_id)
        if item is None:
            raise NotFoundError(
                message="Movie not found in this list",
                code=ErrorCode.LIST_ITEM_NOT_FOUND,
            )
        await self.repository.remove_item(item)

    # ─────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────

    async def _get_owned(self, list_id: UUID, user_id: UUID) -> MovieList:
        movie_list = await self.repository.get_by_id(list_id)
        if movie_list is None:
            raise _list_not_found(list_id)
        if movie_list.user_id != user_id:
            raise AuthorizationError("You can only modify your own lists")
        return movie_list

    async def _read(self, list_id: UUID) -> ListRead:
        row = await self.repository.get_with_count(list_id)
        if row is None:  # pragma: no cover
            raise _list_not_found(list_id)
        return self._to_read_schema(row)

    @staticmethod
    def _visible(movie_list: MovieList, viewer_id: UUID | None) -> bool:
        return movie_list.is_public or movie_list.user_id == viewer_id

    @staticmethod
    def _to_read_schema(row: Row[Any]) -> ListRead:
        movie_list: MovieList = row.MovieList
        return ListRead(
            id=movie_list.id,
            user_id=movie_list.user_id,
            name=movie_list.name,
            description=movie_list.description,
            is_public=movie_list.is_public,
            is_ranked=movie_list.is_ranked,
            item_count=row.item_count,
            user=UserSummary.model_validate(movie_list.user),
            created_at=movie_list.created_at,
            updated_at=movie_list.updated_at,
        )
