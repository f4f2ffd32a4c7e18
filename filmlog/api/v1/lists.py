"""List endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from filmlog.api.deps import CurrentUserID, ListServiceDep, OptionalUserID, PaginationDep
from filmlog.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from filmlog.schemas.movie_list import (
    ListCreate,
    ListDetail,
    ListItemCreate,
    ListItemRead,
    ListRead,
    ListUpdate,
)

router = APIRouter()


@router.post(
    "",
    response_model=DataResponse[ListRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create list",
)
async def create_list(
    data: ListCreate,
    service: ListServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[ListRead]:
    """Create a list.

    - **name**: Required
    - **is_ranked**: Items get positions 1, 2, 3... in the order they are added
    """
    return DataResponse(data=await service.create(user_id, data))


@router.get(
    "/user/{username}",
    response_model=DataResponse[PaginatedResponse[ListRead]],
    summary="List a user's lists",
)
async def list_user_lists(
    username: str,
    service: ListServiceDep,
    viewer_id: OptionalUserID,
    pagination: PaginationDep,
) -> DataResponse[PaginatedResponse[ListRead]]:
    return DataResponse(
        data=await service.list_by_user(
            username,
            viewer_id,
            page=pagination.page,
            limit=pagination.limit,
        )
    )


@router.get(
    "/{list_id}",
    response_model=DataResponse[ListDetail],
    summary="Get list",
)
async def get_list(
    list_id: UUID,
    service: ListServiceDep,
    viewer_id: OptionalUserID,
) -> DataResponse[ListDetail]:
    """Get a list and its items. Private lists are 404 for everyone but the owner."""
    return DataResponse(data=await service.get(list_id, viewer_id))


@router.put(
    "/{list_id}",
    response_model=DataResponse[ListRead],
    summary="Update list",
)
async def update_list(
    list_id: UUID,
    data: ListUpdate,
    service: ListServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[ListRead]:
    return DataResponse(data=await service.update(list_id, user_id, data))


@router.delete(
    "/{list_id}",
    response_model=MessageResponse,
    summary="Delete list",
)
async def delete_list(
    list_id: UUID,
    service: ListServiceDep,
    user_id: CurrentUserID,
) -> MessageResponse:
    await service.delete(list_id, user_id)
    return MessageResponse(message="List deleted successfully")


# ─────────────────────────────────────────────────────────────────────────────
# List Items
# ─────────────────────────────────────────────────────────────────────────────


@router.post(
    "/{list_id}/items",
    response_model=DataResponse[ListItemRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add movie to list",
)
async def add_list_item(
    list_id: UUID,
    data: ListItemCreate,
    service: ListServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[ListItemRead]:
    return DataResponse(data=await service.add_item(list_id, user_id, data))


@router.delete(
    "/{list_id}/items/{movie_id}",
    response_model=MessageResponse,
    summary="Remove movie from list",
)
async def remove_list_item(
    list_id: UUID,
    movie_id: UUID,
    service: ListServiceDep,
    user_id: CurrentUserID,
) -> MessageResponse:
    """Remove a film. Positions of the remaining items are left unchanged."""
    await service.remove_item(list_id, movie_id, user_id)
    return MessageResponse(message="Movie removed from list")
