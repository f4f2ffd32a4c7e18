"""API dependencies for dependency injection.

This is where the request's identity is resolved from the bearer token and
where services are built with their session, settings and TMDB client.
"""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from filmlog.clients.tmdb import TMDBClient
from filmlog.config import Settings, get_settings
from filmlog.core.exceptions import AuthenticationError, ErrorCode
from filmlog.core.security import TokenService
from filmlog.database import async_session_maker, get_db
from filmlog.schemas.base import PaginationParams
from filmlog.services.auth import AuthService
from filmlog.services.catalog import CatalogResolver
from filmlog.services.movie_list import ListService
from filmlog.services.review import ReviewService
from filmlog.services.watchlist import WatchlistService

# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

# auto_error=False so missing tokens produce our own error envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that outlives the request session."""
    return async_session_maker


def get_tmdb_client(request: Request) -> TMDBClient:
    """The shared TMDB client created during application startup."""
    return request.app.state.tmdb_client


def get_token_service(settings: SettingsDep) -> TokenService:
    return TokenService(settings)


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
TMDBClientDep = Annotated[TMDBClient, Depends(get_tmdb_client)]


async def get_catalog_resolver(
    session: DBSession,
    client: TMDBClientDep,
) -> AsyncGenerator[CatalogResolver, None]:
    """Get catalog resolver instance."""
    yield CatalogResolver(session, client)


CatalogDep = Annotated[CatalogResolver, Depends(get_catalog_resolver)]


async def get_auth_service(
    session: DBSession,
    settings: SettingsDep,
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AsyncGenerator[AuthService, None]:
    """Get auth service instance."""
    yield AuthService(session, settings, session_factory)


async def get_review_service(
    session: DBSession,
    catalog: CatalogDep,
) -> AsyncGenerator[ReviewService, None]:
    """Get review service instance."""
    yield ReviewService(session, catalog)


async def get_list_service(
    session: DBSession,
    catalog: CatalogDep,
) -> AsyncGenerator[ListService, None]:
    """Get list service instance."""
    yield ListService(session, catalog)


async def get_watchlist_service(
    session: DBSession,
    catalog: CatalogDep,
) -> AsyncGenerator[WatchlistService, None]:
    """Get watchlist service instance."""
    yield WatchlistService(session, catalog)


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number"),
    limit: int = Query(default=20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    """Get pagination parameters from query."""
    return PaginationParams(page=page, limit=limit)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: TokenServiceDep,
) -> UUID:
    """Extract and verify user ID from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: If token is missing, invalid, or expired.
    """
    if credentials is None:
        raise AuthenticationError(
            message="Authentication required",
            code=ErrorCode.UNAUTHORIZED,
        )

    user_id = tokens.verify_access_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError(
            message="Invalid or expired token",
            code=ErrorCode.TOKEN_INVALID,
        )

    return user_id


async def get_optional_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: TokenServiceDep,
) -> UUID | None:
    """Extract user ID from the bearer token if present.

    Invalid tokens are treated as anonymous rather than rejected.
    """
    if credentials is None:
        return None
    return tokens.verify_access_token(credentials.credentials)


# Type aliases for dependency injection
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]
ListServiceDep = Annotated[ListService, Depends(get_list_service)]
WatchlistServiceDep = Annotated[WatchlistService, Depends(get_watchlist_service)]
PaginationDep = Annotated[PaginationParams, Depends(get_pagination)]
CurrentUserID = Annotated[UUID, Depends(get_current_user_id)]
OptionalUserID = Annotated[UUID | None, Depends(get_optional_user_id)]
