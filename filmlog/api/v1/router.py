"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from filmlog.api.v1 import auth, health, lists, movies, reviews, users, watchlist

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["System"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(movies.router, prefix="/movies", tags=["Movies"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(lists.router, prefix="/lists", tags=["Lists"])
api_router.include_router(watchlist.router, prefix="/watchlist", tags=["Watchlist"])
