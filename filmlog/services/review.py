"""Review service: ratings, write-ups and likes."""

from typing import Any
from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.core.exceptions import AuthorizationError, ConflictError, ErrorCode, NotFoundError
from filmlog.core.validation import validate_rating, validate_review_text
from filmlog.models.review import Review
from filmlog.repositories.review import ReviewRepository
from filmlog.repositories.user import UserRepository
from filmlog.schemas.base import PaginatedResponse
from filmlog.schemas.movie import MovieSummary
from filmlog.schemas.review import LikeStatus, ReviewCreate, ReviewRead, ReviewUpdate
from filmlog.schemas.user import UserSummary
from filmlog.services.catalog import CatalogResolver

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this movie. Use update instead."


def _review_not_found(review_id: UUID | None = None) -> NotFoundError:
    return NotFoundError(resource="Review", resource_id=review_id, code=ErrorCode.REVIEW_NOT_FOUND)


class ReviewService:
    """Service for review business logic.

    Ownership is checked before any field validation on update and
    delete. Private reviews look exactly like missing ones to anyone but
    their author.
    """

    def __init__(self, session: AsyncSession, catalog: CatalogResolver) -> None:
        self.session = session
        self.catalog = catalog
        self.repository = ReviewRepository(session)
        self.user_repository = UserRepository(session)

    async def create(self, user_id: UUID, data: ReviewCreate) -> ReviewRead:
        """Create the user's review for a film.

        Raises:
            ValidationError: Rating is off the half-star grid.
            NotFoundError: The film does not exist (locally or at TMDB).
            ConflictError: The user already reviewed this film.
        """
        rating = validate_rating(data.rating)
        movie = await self.catalog.get_or_resolve(movie_id=data.movie_id, tmdb_id=data.tmdb_id)

        if await self.repository.get_by_user_and_movie(user_id, movie.id) is not None:
            raise ConflictError(message=DUPLICATE_REVIEW_MESSAGE)

        try:
            review = await self.repository.create(
                user_id=user_id,
                movie_id=movie.id,
                rating=rating,
                review_text=validate_review_text(data.review_text),
                contains_spoilers=data.contains_spoilers,
                is_public=data.is_public,
                watched_date=data.watched_date,
            )
        except IntegrityError:
            # Lost a race with a concurrent create for the same pair
            await self.session.rollback()
            raise ConflictError(message=DUPLICATE_REVIEW_MESSAGE) from None

        return await self._read(review.id, user_id)

    async def get(self, review_id: UUID, viewer_id: UUID | None = None) -> ReviewRead:
        """Get a review visible to the viewer."""
        row = await self.repository.get_with_stats(review_id, viewer_id)
        if row is None or not self._visible(row.Review, viewer_id):
            raise _review_not_found(review_id)
        return self._to_read_schema(row)

    async def get_my_movie_review(self, user_id: UUID, movie_id: UUID) -> ReviewRead:
        """The user's own review of a film."""
        review = await self.repository.get_by_user_and_movie(user_id, movie_id)
        if review is None:
            raise _review_not_found()
        return await self._read(review.id, user_id)

    async def list_by_movie(
        self,
        movie_id: UUID,
        viewer_id: UUID | None = None,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[ReviewRead]:
        """Reviews of a film: public ones plus the viewer's own."""
        offset = (page - 1) * limit
        rows = await self.repository.list_for_movie(movie_id, viewer_id, offset=offset, limit=limit)
        total = await self.repository.count_for_movie(movie_id, viewer_id)
        return PaginatedResponse.create(
            items=[self._to_read_schema(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    async def list_by_user(
        self,
        username: str,
        viewer_id: UUID | None = None,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[ReviewRead]:
        """Reviews by a user. Private ones are included only for the author."""
        author = await self.user_repository.get_by_username(username)
        if author is None:
            raise NotFoundError(resource="User", code=ErrorCode.USER_NOT_FOUND)

        include_private = author.id == viewer_id
        offset = (page - 1) * limit
        rows = await self.repository.list_for_user(
            author.id,
            include_private=include_private,
            viewer_id=viewer_id,
            offset=offset,
            limit=limit,
        )
        total = await self.repository.count_for_user(author.id, include_private=include_private)
        return PaginatedResponse.create(
            items=[self._to_read_schema(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    async def update(self, review_id: UUID, user_id: UUID, data: ReviewUpdate) -> ReviewRead:
        """Apply a partial update to the user's own review.

        Raises:
            NotFoundError: No such review.
            AuthorizationError: The review belongs to someone else.
            ValidationError: New rating is off the grid or the text is too long.
        """
        review = await self._get_owned(review_id, user_id)

        fields: dict[str, Any] = data.model_dump(exclude_unset=True)
        if "rating" in fields:
            fields["rating"] = validate_rating(fields["rating"])
        if "review_text" in fields:
            fields["review_text"] = validate_review_text(fields["review_text"])
        for flag in ("contains_spoilers", "is_public"):
            if flag in fields and fields[flag] is None:
                fields.pop(flag)

        await self.repository.update(review, **fields)
        return await self._read(review.id, user_id)

    async def delete(self, review_id: UUID, user_id: UUID) -> None:
        review = await self._get_owned(review_id, user_id)
        await self.repository.delete(review)

    # ─────────────────────────────────────────────────────────────────────
    # Likes
    # ─────────────────────────────────────────────────────────────────────

    async def like(self, review_id: UUID, user_id: UUID) -> LikeStatus:
        """Like a review once.

        Raises:
            NotFoundError: Review missing or not visible to the user.
            ConflictError: Already liked.
        """
        review = await self.repository.get_by_id(review_id)
        if review is None or not self._visible(review, user_id):
            raise _review_not_found(review_id)

        if await self.repository.get_like(user_id, review_id) is not None:
            raise ConflictError(message="You have already liked this review")

        try:
            await self.repository.add_like(user_id, review_id)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(message="You have already liked this review") from None

        return LikeStatus(
            review_id=review_id,
            liked=True,
            like_count=await self.repository.count_likes(review_id),
        )

    async def unlike(self, review_id: UUID, user_id: UUID) -> LikeStatus:
        like = await self.repository.get_like(user_id, review_id)
        if like is None:
            raise NotFoundError(message="Like not found", code=ErrorCode.LIKE_NOT_FOUND)

        await self.repository.remove_like(like)
        return LikeStatus(
            review_id=review_id,
            liked=False,
            like_count=await self.repository.count_likes(review_id),
        )

    async def like_count(self, review_id: UUID) -> int:
        return await self.repository.count_likes(review_id)

    # ─────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────

    async def _get_owned(self, review_id: UUID, user_id: UUID) -> Review:
        review = await self.repository.get_by_id(review_id)
        if review is None:
            raise _review_not_found(review_id)
        if review.user_id != user_id:
            raise AuthorizationError("You can only modify your own reviews")
        return review

    async def _read(self, review_id: UUID, viewer_id: UUID | None) -> ReviewRead:
        row = await self.repository.get_with_stats(review_id, viewer_id)
        if row is None:  # pragma: no cover - the review was just read or written
            raise _review_not_found(review_id)
        return self._to_read_schema(row)

    @staticmethod
    def _visible(review: Review, viewer_id: UUID | None) -> bool:
        return review.is_public or review.user_id == viewer_id

    @staticmethod
    def _to_read_schema(row: Row[Any]) -> ReviewRead:
        review: Review = row.Review
        return ReviewRead(
            id=review.id,
            user_id=review.user_id,
            movie_id=review.movie_id,
            rating=review.rating,
            review_text=review.review_text,
            contains_spoilers=review.contains_spoilers,
            is_public=review.is_public,
            watched_date=review.watched_date,
            like_count=row.like_count,
            user_has_liked=bool(row.user_has_liked),
            user=UserSummary.model_validate(review.user),
            movie=MovieSummary.model_validate(review.movie),
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
