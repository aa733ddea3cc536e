"""
Post endpoints:
  POST   /posts                  — create a post (signed in)
  GET    /posts/{id}             — fetch a single hydrated post
  POST   /posts/{id}/like        — like a post (idempotent)
  DELETE /posts/{id}/like        — remove a like
  POST   /posts/{id}/comments    — comment on a post
  GET    /posts/{id}/comments    — list comments, oldest first
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from opentelemetry import trace
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db
from social_api.deps import get_current_user
from social_api.feed import FeedRepository
from social_api.models import Business, Comment, Post, PostLike, Profile
from social_api.schemas import CommentCreate, CommentResponse, FeedPost, PostCreate
from social_api.telemetry import POST_CREATED_TOTAL

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


async def _require_post(db: AsyncSession, post_id: str) -> Post:
    post = await db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("", response_model=FeedPost, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """
    Create a post for the signed-in profile.

    When a business is attached it must exist and belong to the author.
    Returns the post hydrated the same way the feed shows it.
    """
    with tracer.start_as_current_span("create_post") as span:
        if body.business_id:
            business = await db.get(Business, body.business_id)
            if not business:
                raise HTTPException(status_code=404, detail="Business not found")
            if business.owner_id != user.id:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Business belongs to another profile",
                )

        post = Post(
            user_id=user.id,
            business_id=body.business_id,
            content=body.content,
            image_url=body.image_url,
            youtube_url=body.youtube_url,
            instagram_url=body.instagram_url,
        )
        db.add(post)
        await db.flush()     # materialise id + created_at

        span.set_attribute("post.id", post.id)
        span.set_attribute("post.user_id", post.user_id)

        POST_CREATED_TOTAL.inc()
        logger.info("Post created: %s by user %s", post.id, post.user_id)
        return await FeedRepository(db).get_post(post.id)


@router.get("/{post_id}", response_model=FeedPost)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db)):
    post = await FeedRepository(db).get_post(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("/{post_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def like_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Like a post. Liking twice is a no-op."""
    with tracer.start_as_current_span("like_post"):
        await _require_post(db, post_id)

        existing = await db.get(PostLike, (post_id, user.id))
        if existing:
            return  # already liked

        db.add(PostLike(post_id=post_id, user_id=user.id))


@router.delete("/{post_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def unlike_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with tracer.start_as_current_span("unlike_post"):
        await db.execute(
            delete(PostLike).where(
                PostLike.post_id == post_id,
                PostLike.user_id == user.id,
            )
        )


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    body: CommentCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with tracer.start_as_current_span("add_comment"):
        await _require_post(db, post_id)
        content = body.content.strip()
        if not content:
            raise HTTPException(status_code=422, detail="Comment cannot be blank")

        comment = Comment(post_id=post_id, user_id=user.id, content=content)
        db.add(comment)
        await db.flush()
        logger.info("Comment %s on post %s by %s", comment.id, post_id, user.id)
        return comment


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str, db: AsyncSession = Depends(get_db)):
    await _require_post(db, post_id)
    rows = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    return rows.scalars().all()
