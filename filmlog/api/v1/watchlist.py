"""Watchlist endpoints for the current user."""

from uuid import UUID

from fastapi import APIRouter, status

from filmlog.api.deps import CurrentUserID, PaginationDep, WatchlistServiceDep
from filmlog.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from filmlog.schemas.watchlist import (
    WatchlistAdd,
    WatchlistCount,
    WatchlistEntryRead,
    WatchlistStatus,
)

router = APIRouter()


@router.post(
    "",
    response_model=DataResponse[WatchlistEntryRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add to watchlist",
)
async def add_to_watchlist(
    data: WatchlistAdd,
    service: WatchlistServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[WatchlistEntryRead]:
    return DataResponse(data=await service.add(user_id, data))


@router.get(
    "",
    response_model=DataResponse[PaginatedResponse[WatchlistEntryRead]],
    summary="Get watchlist",
)
async def get_watchlist(
    service: WatchlistServiceDep,
    user_id: CurrentUserID,
    pagination: PaginationDep,
) -> DataResponse[PaginatedResponse[WatchlistEntryRead]]:
    """The current user's watchlist, newest first; ``total`` is the full count."""
    return DataResponse(
        data=await service.list(user_id, page=pagination.page, limit=pagination.limit)
    )


@router.get(
    "/count",
    response_model=DataResponse[WatchlistCount],
    summary="Count watchlist entries",
)
async def count_watchlist(
    service: WatchlistServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[WatchlistCount]:
    return DataResponse(data=WatchlistCount(count=await service.count(user_id)))


@router.get(
    "/check/{movie_id}",
    response_model=DataResponse[WatchlistStatus],
    summary="Check watchlist membership",
)
async def check_watchlist(
    movie_id: UUID,
    service: WatchlistServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[WatchlistStatus]:
    in_watchlist = await service.contains(user_id, movie_id)
    return DataResponse(data=WatchlistStatus(movie_id=movie_id, in_watchlist=in_watchlist))


@router.delete(
    "/{movie_id}",
    response_model=MessageResponse,
    summary="Remove from watchlist",
)
async def remove_from_watchlist(
    movie_id: UUID,
    service: WatchlistServiceDep,
    user_id: CurrentUserID,
) -> MessageResponse:
    await service.remove(user_id, movie_id)
    return MessageResponse(message="Movie removed from watchlist")
