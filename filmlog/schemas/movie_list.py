"""List schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from filmlog.schemas.base import BaseSchema
from filmlog.schemas.movie import MovieSummary
from filmlog.schemas.review import MovieReference
from filmlog.schemas.user import UserSummary


class ListCreate(BaseSchema):
    """Schema for creating a list.

    Name (non-empty, at most 100 characters) and description (at most 2000)
    are checked by the service.
    """

    name: str = Field(..., examples=["Best of 1999"])
    description: str | None = None
    is_public: bool = True
    is_ranked: bool = False


class ListUpdate(BaseSchema):
    """Partial list update. Only fields present in the body are applied.

    Lengths are checked by the service once ownership is established.
    """

    name: str | None = None
    description: str | None = None
    is_public: bool | None = None
    is_ranked: bool | None = None


class ListItemCreate(MovieReference):
    """Add a film to a list."""

    notes: str | None = None


class ListItemRead(BaseSchema):
    id: UUID
    movie_id: UUID
    position: int
    notes: str | None = None
    added_at: datetime
    movie: MovieSummary


class ListRead(BaseSchema):
    """A list with its owner and item count."""

    id: UUID
    user_id: UUID
    name: str
    description: str | None = None
    is_public: bool
    is_ranked: bool
    item_count: int = 0
    user: UserSummary
    created_at: datetime
    updated_at: datetime


class ListDetail(ListRead):
    """A list including its items, ordered by position."""

    items: list[ListItemRead] = Field(default_factory=list)
