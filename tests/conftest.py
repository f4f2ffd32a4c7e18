"""Pytest configuration and fixtures."""

import re
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from filmlog.api.deps import get_db, get_session_factory, get_tmdb_client
from filmlog.clients.tmdb import TMDBClient
from filmlog.config import Settings, get_settings
from filmlog.core import background
from filmlog.core.security import TokenService, hash_password
from filmlog.database import enable_sqlite_foreign_keys
from filmlog.main import app
from filmlog.models import Base, Movie, User
from filmlog.services.auth import AuthService
from filmlog.services.catalog import CatalogResolver
from filmlog.services.movie_list import ListService
from filmlog.services.review import ReviewService
from filmlog.services.watchlist import WatchlistService

# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
enable_sqlite_foreign_keys(test_engine)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

DEFAULT_PASSWORD = "correct-horse-battery"


# ─────────────────────────────────────────────────────────────────────────────
# Fake TMDB
# ─────────────────────────────────────────────────────────────────────────────


def tmdb_movie(tmdb_id: int, title: str, **overrides: Any) -> dict[str, Any]:
    """A TMDB movie-details payload."""
    payload: dict[str, Any] = {
        "id": tmdb_id,
        "imdb_id": f"tt{tmdb_id:07d}",
        "title": title,
        "original_title": title,
        "overview": f"Overview of {title}",
        "tagline": "",
        "release_date": "1999-10-15",
        "runtime": 139,
        "poster_path": f"/poster{tmdb_id}.jpg",
        "backdrop_path": f"/backdrop{tmdb_id}.jpg",
        "vote_average": 8.4,
        "vote_count": 26000,
        "popularity": 61.416,
        "genres": [{"id": 18, "name": "Drama"}],
        "production_companies": [{"id": 508, "name": "Regency Enterprises"}],
        "production_countries": [{"iso_3166_1": "US", "name": "United States of America"}],
        "spoken_languages": [{"iso_639_1": "en", "name": "English"}],
        "status": "Released",
        "budget": 63000000,
        "revenue": 100853753,
        "original_language": "en",
        "adult": False,
        "credits": {"cast": [], "crew": []},
    }
    payload.update(overrides)
    return payload


class FakeTMDB:
    """In-memory stand-in for the TMDB API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.movies: dict[int, dict[str, Any]] = {
            550: tmdb_movie(550, "Fight Club"),
            603: tmdb_movie(603, "The Matrix", release_date="1999-03-31", popularity=80.5),
            680: tmdb_movie(680, "Pulp Fiction", release_date="1994-09-10", popularity=70.1),
            13: tmdb_movie(13, "Forrest Gump", release_date="", popularity=55.0),
        }
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None
        self.network_error = False
        self.malformed_body: str | None = None

    def detail_calls(self, tmdb_id: int) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(f"/movie/{tmdb_id}"))

    def _page(self, movies: list[dict[str, Any]], page: int) -> dict[str, Any]:
        return {
            "page": page,
            "total_pages": 1,
            "total_results": len(movies),
            "results": [
                {
                    "id": m["id"],
                    "title": m["title"],
                    "original_title": m["original_title"],
                    "overview": m["overview"],
                    "release_date": m["release_date"],
                    "poster_path": m["poster_path"],
                    "backdrop_path": m["backdrop_path"],
                    "vote_average": m["vote_average"],
                    "vote_count": m["vote_count"],
                    "popularity": m["popularity"],
                    "adult": m["adult"],
                    "genre_ids": [g["id"] for g in m["genres"]],
                    "original_language": m["original_language"],
                }
                for m in movies
            ],
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"status_message": "Service unavailable"})
        if self.malformed_body is not None:
            return httpx.Response(
                200, text=self.malformed_body, headers={"content-type": "text/plain"}
            )

        path = request.url.path.removeprefix("/3")
        page = int(request.url.params.get("page", "1"))

        detail = re.fullmatch(r"/movie/(\d+)", path)
        if detail:
            movie = self.movies.get(int(detail.group(1)))
            if movie is None:
                return httpx.Response(
                    404,
                    json={
                        "status_code": 34,
                        "status_message": "The resource you requested could not be found.",
                    },
                )
            return httpx.Response(200, json=movie)

        if path == "/search/movie":
            query = request.url.params.get("query", "").lower()
            hits = [m for m in self.movies.values() if query in m["title"].lower()]
            return httpx.Response(200, json=self._page(hits, page))

        listings = {
            "/movie/popular",
            "/movie/top_rated",
            "/movie/now_playing",
            "/movie/upcoming",
            "/trending/movie/day",
            "/trending/movie/week",
        }
        if path in listings:
            return httpx.Response(200, json=self._page(list(self.movies.values()), page))

        return httpx.Response(404, json={"status_message": "Invalid path"})


@pytest.fixture
def fake_tmdb() -> FakeTMDB:
    return FakeTMDB()


@pytest.fixture
async def tmdb_client(fake_tmdb: FakeTMDB) -> AsyncGenerator[TMDBClient, None]:
    client = TMDBClient("test-api-key", transport=httpx.MockTransport(fake_tmdb.handler))
    yield client
    await client.aclose()


# ─────────────────────────────────────────────────────────────────────────────
# Database and services
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    await background.drain()
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def catalog(db_session: AsyncSession, tmdb_client: TMDBClient) -> CatalogResolver:
    return CatalogResolver(db_session, tmdb_client)


@pytest.fixture
def auth_service(db_session: AsyncSession, settings: Settings) -> AuthService:
    return AuthService(db_session, settings, TestSessionLocal)


@pytest.fixture
def review_service(db_session: AsyncSession, catalog: CatalogResolver) -> ReviewService:
    return ReviewService(db_session, catalog)


@pytest.fixture
def list_service(db_session: AsyncSession, catalog: CatalogResolver) -> ListService:
    return ListService(db_session, catalog)


@pytest.fixture
def watchlist_service(db_session: AsyncSession, catalog: CatalogResolver) -> WatchlistService:
    return WatchlistService(db_session, catalog)


# ─────────────────────────────────────────────────────────────────────────────
# Users and movies
# ─────────────────────────────────────────────────────────────────────────────

UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def make_user(db_session: AsyncSession) -> UserFactory:
    """Factory that inserts and commits a user."""

    async def _make_user(
        username: str,
        *,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
        is_public: bool = True,
    ) -> User:
        user = User(
            username=username,
            email=f"{username.lower()}@example.com",
            hashed_password=hash_password(password),
            display_name=username.title(),
            is_active=is_active,
            is_public=is_public,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def alice(make_user: UserFactory) -> User:
    return await make_user("alice")


@pytest.fixture
async def bob(make_user: UserFactory) -> User:
    return await make_user("bob")


@pytest.fixture
async def movie(catalog: CatalogResolver, db_session: AsyncSession) -> Movie:
    """Fight Club, resolved into the local cache."""
    resolved = await catalog.resolve(550)
    await db_session.commit()
    return resolved


@pytest.fixture
def headers_for(token_service: TokenService) -> Callable[[User], dict[str, str]]:
    """Build Authorization headers carrying a real access token for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_service.create_access_token(user.id)}"}

    return _headers


# ─────────────────────────────────────────────────────────────────────────────
# HTTP client
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    tmdb_client: TMDBClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Test client sharing the test session and the fake TMDB.

    Authentication is not overridden; tests send real bearer tokens.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tmdb_client] = lambda: tmdb_client
    app.dependency_overrides[get_session_factory] = lambda: TestSessionLocal

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
