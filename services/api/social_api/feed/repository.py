"""
Feed data access.

Two reads back the timeline:
  • following_ids — follow edges for one follower
  • recent_posts  — newest posts joined with author, business, likes and
                    comments; optionally restricted to a set of authors
"""
import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from social_api.models import Follow, Post
from social_api.schemas import AuthorSummary, BusinessSummary, FeedPost

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


def _post_options():
    return (
        selectinload(Post.author),
        selectinload(Post.business),
        selectinload(Post.likes),
        selectinload(Post.comments),
    )


def to_feed_post(post: Post) -> FeedPost:
    like_user_ids = [like.user_id for like in post.likes]
    return FeedPost(
        id=post.id,
        user_id=post.user_id,
        business_id=post.business_id,
        content=post.content,
        image_url=post.image_url,
        youtube_url=post.youtube_url,
        instagram_url=post.instagram_url,
        created_at=post.created_at,
        author=AuthorSummary.model_validate(post.author) if post.author else None,
        business=BusinessSummary.model_validate(post.business) if post.business else None,
        like_user_ids=like_user_ids,
        like_count=len(like_user_ids),
        comment_count=len(post.comments),
    )


class FeedRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def following_ids(self, user_id: str) -> list[str]:
        rows = await self._session.execute(
            select(Follow.following_id).where(Follow.follower_id == user_id)
        )
        return [r[0] for r in rows.all()]

    async def recent_posts(
        self,
        limit: int = DEFAULT_LIMIT,
        author_ids: Optional[Iterable[str]] = None,
    ) -> list[FeedPost]:
        """
        Most recent `limit` posts, newest first.

        `author_ids` restricts the result to posts by those authors; None
        means no restriction.
        """
        stmt = (
            select(Post)
            .options(*_post_options())
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
        )
        if author_ids is not None:
            stmt = stmt.where(Post.user_id.in_(list(author_ids)))

        rows = await self._session.execute(stmt)
        return [to_feed_post(p) for p in rows.scalars().all()]

    async def get_post(self, post_id: str) -> Optional[FeedPost]:
        rows = await self._session.execute(
            select(Post)
            .options(*_post_options())
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        post = rows.scalar_one_or_none()
        return to_feed_post(post) if post else None
