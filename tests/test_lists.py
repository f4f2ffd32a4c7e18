"""Tests for user lists and ranked list items."""

from collections.abc import Callable
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from filmlog.models import Movie, User
from filmlog.repositories.movie_list import MovieListRepository
from filmlog.schemas.movie_list import ListCreate, ListItemCreate, ListUpdate
from filmlog.services.catalog import CatalogResolver
from filmlog.services.movie_list import ListService

HeadersFor = Callable[[User], dict[str, str]]


# ─────────────────────────────────────────────────────────────────────────────
# List CRUD
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_list(list_service: ListService, alice: User) -> None:
    created = await list_service.create(
        alice.id,
        ListCreate(name="  Best of 1999 ", description="Films I love", is_ranked=True),
    )

    assert created.name == "Best of 1999"
    assert created.is_ranked is True
    assert created.is_public is True
    assert created.item_count == 0
    assert created.user.username == "alice"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   ", "\x00\x01"])
async def test_create_list_requires_name(list_service: ListService, alice: User, name: str) -> None:
    with pytest.raises(ValidationError):
        await list_service.create(alice.id, ListCreate(name=name))


@pytest.mark.asyncio
async def test_partial_update(list_service: ListService, alice: User) -> None:
    created = await list_service.create(
        alice.id, ListCreate(name="Watch later", description="Someday")
    )

    updated = await list_service.update(created.id, alice.id, ListUpdate(is_public=False))

    assert updated.is_public is False
    assert updated.name == "Watch later"
    assert updated.description == "Someday"


@pytest.mark.asyncio
async def test_update_rejects_empty_name(list_service: ListService, alice: User) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Keepers"))

    with pytest.raises(ValidationError):
        await list_service.update(created.id, alice.id, ListUpdate(name=" "))


@pytest.mark.asyncio
async def test_only_owner_can_modify(
    list_service: ListService, alice: User, bob: User, movie: Movie
) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Mine"))

    with pytest.raises(AuthorizationError):
        await list_service.update(created.id, bob.id, ListUpdate(name="Ours"))
    with pytest.raises(AuthorizationError):
        await list_service.update(created.id, bob.id, ListUpdate(name=""))
    with pytest.raises(AuthorizationError):
        await list_service.add_item(created.id, bob.id, ListItemCreate(movie_id=movie.id))
    with pytest.raises(AuthorizationError):
        await list_service.delete(created.id, bob.id)

    assert (await list_service.get(created.id, alice.id)).name == "Mine"


@pytest.mark.asyncio
async def test_ownership_is_checked_before_lengths(
    list_service: ListService, alice: User, bob: User, movie: Movie
) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Mine"))

    with pytest.raises(AuthorizationError):
        await list_service.update(created.id, bob.id, ListUpdate(name="x" * 101))
    with pytest.raises(AuthorizationError):
        await list_service.update(created.id, bob.id, ListUpdate(description="x" * 2001))
    with pytest.raises(AuthorizationError):
        await list_service.add_item(
            created.id, bob.id, ListItemCreate(movie_id=movie.id, notes="x" * 2001)
        )


@pytest.mark.asyncio
async def test_owner_gets_length_errors(
    list_service: ListService, alice: User, movie: Movie
) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Mine"))

    with pytest.raises(ValidationError) as exc_info:
        await list_service.update(created.id, alice.id, ListUpdate(name="x" * 101))
    assert exc_info.value.details == [
        {"field": "name", "message": "List name must be at most 100 characters"}
    ]
    with pytest.raises(ValidationError):
        await list_service.update(created.id, alice.id, ListUpdate(description="x" * 2001))
    with pytest.raises(ValidationError):
        await list_service.add_item(
            created.id, alice.id, ListItemCreate(movie_id=movie.id, notes="x" * 2001)
        )
    with pytest.raises(ValidationError):
        await list_service.create(alice.id, ListCreate(name="Long", description="x" * 2001))


@pytest.mark.asyncio
async def test_delete_list(list_service: ListService, alice: User, movie: Movie) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Temporary"))
    await list_service.add_item(created.id, alice.id, ListItemCreate(movie_id=movie.id))

    await list_service.delete(created.id, alice.id)

    with pytest.raises(NotFoundError):
        await list_service.get(created.id, alice.id)


@pytest.mark.asyncio
async def test_missing_list(list_service: ListService, alice: User) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await list_service.get(uuid4(), alice.id)
    assert exc_info.value.code == ErrorCode.LIST_NOT_FOUND


@pytest.mark.asyncio
async def test_private_list_visibility(list_service: ListService, alice: User, bob: User) -> None:
    private = await list_service.create(alice.id, ListCreate(name="Secret", is_public=False))
    await list_service.create(alice.id, ListCreate(name="Open"))

    assert (await list_service.get(private.id, alice.id)).name == "Secret"
    with pytest.raises(NotFoundError):
        await list_service.get(private.id, bob.id)
    with pytest.raises(NotFoundError):
        await list_service.get(private.id)

    own = await list_service.list_by_user("alice", alice.id)
    others = await list_service.list_by_user("alice", bob.id)
    assert own.total == 2
    assert others.total == 1
    assert others.items[0].name == "Open"


# ─────────────────────────────────────────────────────────────────────────────
# Items and positions
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_ranked_positions_survive_removal(
    list_service: ListService, catalog: CatalogResolver, alice: User
) -> None:
    """Ranked items get 1, 2, 3 and keep their positions when one is removed."""
    ranked = await list_service.create(alice.id, ListCreate(name="Top 3", is_ranked=True))
    first = await list_service.add_item(ranked.id, alice.id, ListItemCreate(tmdb_id=550))
    second = await list_service.add_item(ranked.id, alice.id, ListItemCreate(tmdb_id=603))
    third = await list_service.add_item(ranked.id, alice.id, ListItemCreate(tmdb_id=680))

    assert [first.position, second.position, third.position] == [1, 2, 3]

    await list_service.remove_item(ranked.id, second.movie_id, alice.id)

    detail = await list_service.get(ranked.id, alice.id)
    assert [item.position for item in detail.items] == [1, 3]
    assert [item.movie.tmdb_id for item in detail.items] == [550, 680]
    assert detail.item_count == 2

    fourth = await list_service.add_item(ranked.id, alice.id, ListItemCreate(tmdb_id=13))
    assert fourth.position == 4


@pytest.mark.asyncio
async def test_unranked_items_have_position_zero(
    list_service: ListService, alice: User, movie: Movie
) -> None:
    loose = await list_service.create(alice.id, ListCreate(name="Loose"))

    item = await list_service.add_item(
        loose.id, alice.id, ListItemCreate(movie_id=movie.id, notes="rewatch")
    )

    assert item.position == 0
    assert item.notes == "rewatch"
    assert item.movie.title == "Fight Club"


@pytest.mark.asyncio
async def test_duplicate_item_is_conflict(
    list_service: ListService, alice: User, movie: Movie
) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Once"))
    await list_service.add_item(created.id, alice.id, ListItemCreate(movie_id=movie.id))

    with pytest.raises(ConflictError) as exc_info:
        await list_service.add_item(created.id, alice.id, ListItemCreate(tmdb_id=550))
    assert exc_info.value.message == "Movie already in this list"


@pytest.mark.asyncio
async def test_concurrent_duplicate_item_is_conflict(
    list_service: ListService,
    db_session: AsyncSession,
    alice: User,
    movie: Movie,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An item that slips past the pre-check is caught by the unique constraint."""
    alice_id, movie_id = alice.id, movie.id
    created = await list_service.create(alice_id, ListCreate(name="Once"))
    list_id = created.id
    await list_service.add_item(list_id, alice_id, ListItemCreate(movie_id=movie_id))
    await db_session.commit()

    async def missed_check(self: MovieListRepository, list_id: UUID, movie_id: UUID) -> None:
        return None

    monkeypatch.setattr(MovieListRepository, "get_item", missed_check)

    with pytest.raises(ConflictError) as exc_info:
        await list_service.add_item(list_id, alice_id, ListItemCreate(movie_id=movie_id))
    assert exc_info.value.message == "Movie already in this list"

    assert len(await MovieListRepository(db_session).get_items(list_id)) == 1


@pytest.mark.asyncio
async def test_remove_missing_item(list_service: ListService, alice: User, movie: Movie) -> None:
    created = await list_service.create(alice.id, ListCreate(name="Empty"))

    with pytest.raises(NotFoundError) as exc_info:
        await list_service.remove_item(created.id, movie.id, alice.id)
    assert exc_info.value.code == ErrorCode.LIST_ITEM_NOT_FOUND


@pytest.mark.asyncio
async def test_item_count_in_user_listing(
    list_service: ListService, alice: User, movie: Movie
) -> None:
    created = await list_service.create(alice.id, ListCreate(name="One film"))
    await list_service.add_item(created.id, alice.id, ListItemCreate(movie_id=movie.id))
    await list_service.add_item(created.id, alice.id, ListItemCreate(tmdb_id=603))

    listing = await list_service.list_by_user("alice", alice.id)

    assert listing.items[0].item_count == 2


# ─────────────────────────────────────────────────────────────────────────────
# List Endpoints
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_endpoints(
    client: AsyncClient, alice: User, movie: Movie, headers_for: HeadersFor
) -> None:
    created = await client.post(
        "/api/v1/lists",
        json={"name": "Favourites", "is_ranked": True},
        headers=headers_for(alice),
    )
    assert created.status_code == 201
    list_id = created.json()["data"]["id"]

    added = await client.post(
        f"/api/v1/lists/{list_id}/items",
        json={"movie_id": str(movie.id)},
        headers=headers_for(alice),
    )
    assert added.status_code == 201
    assert added.json()["data"]["position"] == 1

    detail = await client.get(f"/api/v1/lists/{list_id}")
    assert detail.status_code == 200
    assert detail.json()["data"]["item_count"] == 1
    assert detail.json()["data"]["items"][0]["movie"]["tmdb_id"] == 550

    removed = await client.delete(
        f"/api/v1/lists/{list_id}/items/{movie.id}",
        headers=headers_for(alice),
    )
    assert removed.status_code == 200

    missing = await client.delete(
        f"/api/v1/lists/{list_id}/items/{movie.id}",
        headers=headers_for(alice),
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_create_list_endpoint_empty_name(
    client: AsyncClient, alice: User, headers_for: HeadersFor
) -> None:
    response = await client.post("/api/v1/lists", json={"name": "  "}, headers=headers_for(alice))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_delete_list_endpoint_forbidden(
    client: AsyncClient, alice: User, bob: User, headers_for: HeadersFor
) -> None:
    created = await client.post(
        "/api/v1/lists", json={"name": "Alice only"}, headers=headers_for(alice)
    )
    list_id = created.json()["data"]["id"]

    response = await client.delete(f"/api/v1/lists/{list_id}", headers=headers_for(bob))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_user_lists_endpoint(
    client: AsyncClient, alice: User, headers_for: HeadersFor
) -> None:
    await client.post("/api/v1/lists", json={"name": "Public"}, headers=headers_for(alice))
    await client.post(
        "/api/v1/lists",
        json={"name": "Hidden", "is_public": False},
        headers=headers_for(alice),
    )

    anonymous = await client.get("/api/v1/lists/user/alice")
    owner = await client.get("/api/v1/lists/user/alice", headers=headers_for(alice))

    assert anonymous.json()["data"]["total"] == 1
    assert owner.json()["data"]["total"] == 2


@pytest.mark.asyncio
async def test_update_list_endpoint_forbidden_before_validation(
    client: AsyncClient, alice: User, bob: User, headers_for: HeadersFor
) -> None:
    created = await client.post(
        "/api/v1/lists", json={"name": "Alice only"}, headers=headers_for(alice)
    )
    list_id = created.json()["data"]["id"]

    foreign = await client.put(
        f"/api/v1/lists/{list_id}", json={"name": "x" * 101}, headers=headers_for(bob)
    )
    own = await client.put(
        f"/api/v1/lists/{list_id}", json={"name": "x" * 101}, headers=headers_for(alice)
    )

    assert foreign.status_code == 403
    assert foreign.json()["error"]["code"] == "FORBIDDEN"
    assert own.status_code == 400
    assert own.json()["error"]["details"][0]["field"] == "name"
