"""Review repository with query-time like aggregation."""

from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Row, and_, exists, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmlog.models.review import Review, ReviewLike
from filmlog.repositories.base import BaseRepository


def like_count_column() -> Any:
    """Correlated count of likes for the review in the outer query."""
    return (
        select(func.count(ReviewLike.id))
        .where(ReviewLike.review_id == Review.id)
        .correlate(Review)
        .scalar_subquery()
        .label("like_count")
    )


def liked_by_column(viewer_id: UUID | None) -> Any:
    """Whether ``viewer_id`` has liked the review in the outer query."""
    if viewer_id is None:
        return false().label("user_has_liked")
    return (
        exists()
        .where(and_(ReviewLike.review_id == Review.id, ReviewLike.user_id == viewer_id))
        .correlate(Review)
        .label("user_has_liked")
    )


def visible_to(viewer_id: UUID | None) -> ColumnElement[bool]:
    """Public reviews, plus the viewer's own private ones."""
    if viewer_id is None:
        return Review.is_public.is_(True)
    return or_(Review.is_public.is_(True), Review.user_id == viewer_id)


class ReviewRepository(BaseRepository[Review]):
    """Repository for reviews and their likes.

    Listing queries return rows of ``(Review, like_count, user_has_liked)``.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Review, session)

    def _with_stats(self, viewer_id: UUID | None) -> Any:
        return select(Review, like_count_column(), liked_by_column(viewer_id))

    async def get_with_stats(
        self,
        review_id: UUID,
        viewer_id: UUID | None = None,
    ) -> Row[Any] | None:
        """Get one review with its like count and the viewer's like flag."""
        result = await self.session.execute(
            self._with_stats(viewer_id)
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        return result.one_or_none()

    async def get_by_user_and_movie(self, user_id: UUID, movie_id: UUID) -> Review | None:
        result = await self.session.execute(
            select(Review).where(Review.user_id == user_id, Review.movie_id == movie_id)
        )
        return result.scalar_one_or_none()

    async def list_for_movie(
        self,
        movie_id: UUID,
        viewer_id: UUID | None,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Row[Any]]:
        """Reviews of a movie visible to the viewer, newest first."""
        result = await self.session.execute(
            self._with_stats(viewer_id)
            .where(Review.movie_id == movie_id, visible_to(viewer_id))
            .order_by(Review.created_at.desc(), Review.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.all())

    async def count_for_movie(self, movie_id: UUID, viewer_id: UUID | None) -> int:
        return await self.count(Review.movie_id == movie_id, visible_to(viewer_id))

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        include_private: bool,
        viewer_id: UUID | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Row[Any]]:
        """Reviews written by a user, newest first."""
        query = self._with_stats(viewer_id).where(Review.user_id == user_id)
        if not include_private:
            query = query.where(Review.is_public.is_(True))
        result = await self.session.execute(
            query.order_by(Review.created_at.desc(), Review.id).offset(offset).limit(limit)
        )
        return list(result.all())

    async def count_for_user(self, user_id: UUID, *, include_private: bool) -> int:
        criteria = [Review.user_id == user_id]
        if not include_private:
            criteria.append(Review.is_public.is_(True))
        return await self.count(*criteria)

    # ─────────────────────────────────────────────────────────────────────
    # Likes
    # ─────────────────────────────────────────────────────────────────────

    async def get_like(self, user_id: UUID, review_id: UUID) -> ReviewLike | None:
        result = await self.session.execute(
            select(ReviewLike).where(
                ReviewLike.user_id == user_id,
                ReviewLike.review_id == review_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_like(self, user_id: UUID, review_id: UUID) -> ReviewLike:
        like = ReviewLike(user_id=user_id, review_id=review_id)
        self.session.add(like)
        await self.session.flush()
        return like

    async def remove_like(self, like: ReviewLike) -> None:
        await self.session.delete(like)
        await self.session.flush()

    async def count_likes(self, review_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count(ReviewLike.id)).where(ReviewLike.review_id == review_id)
        )
        return result.scalar_one()
