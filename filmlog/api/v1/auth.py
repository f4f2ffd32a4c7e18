"""Authentication endpoints: signup, login, token refresh and own profile."""

from fastapi import APIRouter, status

from filmlog.api.deps import AuthServiceDep, CurrentUserID
from filmlog.schemas.auth import AccessTokenResponse, AuthResponse, LoginRequest, RefreshRequest
from filmlog.schemas.base import DataResponse
from filmlog.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter()


@router.post(
    "/register",
    response_model=DataResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
async def register(
    data: UserCreate,
    service: AuthServiceDep,
) -> DataResponse[AuthResponse]:
    """Create an account and return it with a token pair.

    - **username**: 3-20 characters, starts with a letter, letters/digits/underscores
    - **email**: Unique email address
    - **password**: At least 8 characters
    """
    return DataResponse(data=await service.register(data))


@router.post(
    "/login",
    response_model=DataResponse[AuthResponse],
    summary="Login",
)
async def login(
    data: LoginRequest,
    service: AuthServiceDep,
) -> DataResponse[AuthResponse]:
    """Authenticate with email and password.

    An unknown email and a wrong password return the same 401.
    """
    return DataResponse(data=await service.login(data.email, data.password))


@router.post(
    "/refresh",
    response_model=DataResponse[AccessTokenResponse],
    summary="Refresh access token",
)
async def refresh_token(
    data: RefreshRequest,
    service: AuthServiceDep,
) -> DataResponse[AccessTokenResponse]:
    """Exchange a refresh token for a new access token."""
    return DataResponse(data=await service.refresh(data.refresh_token))


@router.get(
    "/profile",
    response_model=DataResponse[UserRead],
    summary="Get own profile",
)
async def get_profile(
    user_id: CurrentUserID,
    service: AuthServiceDep,
) -> DataResponse[UserRead]:
    return DataResponse(data=await service.get_profile(user_id))


@router.put(
    "/profile",
    response_model=DataResponse[UserRead],
    summary="Update own profile",
)
async def update_profile(
    data: UserUpdate,
    user_id: CurrentUserID,
    service: AuthServiceDep,
) -> DataResponse[UserRead]:
    """Update profile fields. Only fields present in the body change."""
    return DataResponse(data=await service.update_profile(user_id, data))
