"""Public user profile endpoints."""

from fastapi import APIRouter

from filmlog.api.deps import AuthServiceDep, OptionalUserID
from filmlog.schemas.base import DataResponse
from filmlog.schemas.user import UserPublic

router = APIRouter()


@router.get(
    "/{username}",
    response_model=DataResponse[UserPublic],
    summary="Get user profile",
)
async def get_user(
    username: str,
    service: AuthServiceDep,
    viewer_id: OptionalUserID,
) -> DataResponse[UserPublic]:
    """Get a user's public profile. Private profiles are visible only to their owner."""
    return DataResponse(data=await service.get_public_profile(username, viewer_id))
