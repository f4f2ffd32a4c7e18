"""Movie endpoints: TMDB listings and cached movie details."""

from typing import Annotated

from fastapi import APIRouter, Query

from filmlog.api.deps import CatalogDep
from filmlog.schemas.base import DataResponse
from filmlog.schemas.movie import MovieRead, ProviderPage

router = APIRouter()

PageQuery = Annotated[int, Query(ge=1, le=500, description="TMDB page number")]
LimitQuery = Annotated[int, Query(ge=1, le=100)]


@router.get("/search", response_model=DataResponse[ProviderPage], summary="Search TMDB")
async def search_movies(
    catalog: CatalogDep,
    query: Annotated[str, Query(description="Title to search for")] = "",
    page: PageQuery = 1,
    include_adult: bool = False,
) -> DataResponse[ProviderPage]:
    """Search TMDB by title. Results are not cached."""
    return DataResponse(data=await catalog.search(query, page=page, include_adult=include_adult))


@router.get("/popular", response_model=DataResponse[ProviderPage], summary="Popular movies")
async def popular_movies(catalog: CatalogDep, page: PageQuery = 1) -> DataResponse[ProviderPage]:
    return DataResponse(data=await catalog.popular(page=page))


@router.get("/trending", response_model=DataResponse[ProviderPage], summary="Trending movies")
async def trending_movies(
    catalog: CatalogDep,
    time_window: str = "week",
    page: PageQuery = 1,
) -> DataResponse[ProviderPage]:
    """Trending movies for ``day`` or ``week``; other windows are rejected with 400."""
    return DataResponse(data=await catalog.trending(time_window, page=page))


@router.get("/top-rated", response_model=DataResponse[ProviderPage], summary="Top rated movies")
async def top_rated_movies(catalog: CatalogDep, page: PageQuery = 1) -> DataResponse[ProviderPage]:
    return DataResponse(data=await catalog.top_rated(page=page))


@router.get("/now-playing", response_model=DataResponse[ProviderPage], summary="Now playing")
async def now_playing_movies(
    catalog: CatalogDep, page: PageQuery = 1
) -> DataResponse[ProviderPage]:
    return DataResponse(data=await catalog.now_playing(page=page))


@router.get("/upcoming", response_model=DataResponse[ProviderPage], summary="Upcoming movies")
async def upcoming_movies(catalog: CatalogDep, page: PageQuery = 1) -> DataResponse[ProviderPage]:
    return DataResponse(data=await catalog.upcoming(page=page))


# ─────────────────────────────────────────────────────────────────────────────
# Cached movies
# ─────────────────────────────────────────────────────────────────────────────


@router.get(
    "/local/search",
    response_model=DataResponse[list[MovieRead]],
    summary="Search cached movies",
)
async def search_local_movies(
    catalog: CatalogDep,
    query: Annotated[str, Query(description="Title substring")] = "",
    limit: LimitQuery = 20,
) -> DataResponse[list[MovieRead]]:
    movies = await catalog.search_local(query, limit=limit)
    return DataResponse(data=[MovieRead.model_validate(m) for m in movies])


@router.get(
    "/local/popular",
    response_model=DataResponse[list[MovieRead]],
    summary="Popular cached movies",
)
async def popular_local_movies(
    catalog: CatalogDep,
    limit: LimitQuery = 20,
) -> DataResponse[list[MovieRead]]:
    movies = await catalog.popular_local(limit=limit)
    return DataResponse(data=[MovieRead.model_validate(m) for m in movies])


@router.get(
    "/{tmdb_id}",
    response_model=DataResponse[MovieRead],
    summary="Get movie details",
)
async def get_movie(tmdb_id: int, catalog: CatalogDep) -> DataResponse[MovieRead]:
    """Get a movie by TMDB id, caching it locally on first access.

    The response carries the local ``id`` used by reviews, lists and the
    watchlist.
    """
    movie = await catalog.resolve(tmdb_id)
    return DataResponse(data=MovieRead.model_validate(movie))
