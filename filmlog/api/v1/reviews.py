"""Review endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from filmlog.api.deps import CurrentUserID, OptionalUserID, PaginationDep, ReviewServiceDep
from filmlog.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from filmlog.schemas.review import LikeStatus, ReviewCreate, ReviewRead, ReviewUpdate

router = APIRouter()


@router.post(
    "",
    response_model=DataResponse[ReviewRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create review",
)
async def create_review(
    data: ReviewCreate,
    service: ReviewServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[ReviewRead]:
    """Review a film, identified by ``movie_id`` or ``tmdb_id``.

    - **rating**: 0.5 to 5.0 in half steps (optional)
    - **review_text**: Free text (optional)

    One review per film per user; a second one returns 409.
    """
    return DataResponse(data=await service.create(user_id, data))


@router.get(
    "/movie/{movie_id}",
    response_model=DataResponse[PaginatedResponse[ReviewRead]],
    summary="List reviews of a movie",
)
async def list_movie_reviews(
    movie_id: UUID,
    service: ReviewServiceDep,
    viewer_id: OptionalUserID,
    pagination: PaginationDep,
) -> DataResponse[PaginatedResponse[ReviewRead]]:
    return DataResponse(
        data=await service.list_by_movie(
            movie_id,
            viewer_id,
            page=pagination.page,
            limit=pagination.limit,
        )
    )


@router.get(
    "/user/{username}",
    response_model=DataResponse[PaginatedResponse[ReviewRead]],
    summary="List reviews by a user",
)
async def list_user_reviews(
    username: str,
    service: ReviewServiceDep,
    viewer_id: OptionalUserID,
    pagination: PaginationDep,
) -> DataResponse[PaginatedResponse[ReviewRead]]:
    return DataResponse(
        data=await service.list_by_user(
            username,
            viewer_id,
            page=pagination.page,
            limit=pagination.limit,
        )
    )


@router.get(
    "/my-review/{movie_id}",
    response_model=DataResponse[ReviewRead],
    summary="Get own review of a movie",
)
async def get_my_review(
    movie_id: UUID,
    service: ReviewServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[ReviewRead]:
    return DataResponse(data=await service.get_my_movie_review(user_id, movie_id))


@router.get(
    "/{review_id}",
    response_model=DataResponse[ReviewRead],
    summary="Get review",
)
async def get_review(
    review_id: UUID,
    service: ReviewServiceDep,
    viewer_id: OptionalUserID,
) -> DataResponse[ReviewRead]:
    return DataResponse(data=await service.get(review_id, viewer_id))


@router.put(
    "/{review_id}",
    response_model=DataResponse[ReviewRead],
    summary="Update review",
)
async def update_review(
    review_id: UUID,
    data: ReviewUpdate,
    service: ReviewServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[ReviewRead]:
    """Update your review. Only fields included in the body change."""
    return DataResponse(data=await service.update(review_id, user_id, data))


@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    summary="Delete review",
)
async def delete_review(
    review_id: UUID,
    service: ReviewServiceDep,
    user_id: CurrentUserID,
) -> MessageResponse:
    await service.delete(review_id, user_id)
    return MessageResponse(message="Review deleted successfully")


# ─────────────────────────────────────────────────────────────────────────────
# Likes
# ─────────────────────────────────────────────────────────────────────────────


@router.post(
    "/{review_id}/like",
    response_model=DataResponse[LikeStatus],
    summary="Like review",
)
async def like_review(
    review_id: UUID,
    service: ReviewServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[LikeStatus]:
    return DataResponse(data=await service.like(review_id, user_id))


@router.delete(
    "/{review_id}/like",
    response_model=DataResponse[LikeStatus],
    summary="Unlike review",
)
async def unlike_review(
    review_id: UUID,
    service: ReviewServiceDep,
    user_id: CurrentUserID,
) -> DataResponse[LikeStatus]:
    return DataResponse(data=await service.unlike(review_id, user_id))
