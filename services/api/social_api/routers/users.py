"""
Profile management endpoints:
  POST /users                — create a profile
  GET  /users/suggested      — profiles the caller might follow
  GET  /users/{id}           — fetch a profile
  POST /users/follow         — follow another profile (signed in)
  POST /users/unfollow       — unfollow (signed in)
  GET  /users/{id}/followers — list followers
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from opentelemetry import trace
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.config import settings
from social_api.database import get_db
from social_api.deps import get_current_user, get_optional_user
from social_api.models import Follow, Profile
from social_api.schemas import FollowRequest, ProfileCreate, ProfileResponse

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


async def suggested_for(db: AsyncSession, user: Optional[Profile]) -> list[Profile]:
    """Newest profiles the caller is not and does not already follow."""
    stmt = select(Profile).order_by(Profile.created_at.desc(), Profile.id.desc())
    if user is not None:
        followed = select(Follow.following_id).where(Follow.follower_id == user.id)
        stmt = stmt.where(Profile.id != user.id, Profile.id.not_in(followed))
    rows = await db.execute(stmt.limit(settings.suggested_users_limit))
    return list(rows.scalars().all())


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(body: ProfileCreate, db: AsyncSession = Depends(get_db)):
    with tracer.start_as_current_span("create_profile"):
        existing = await db.execute(
            select(Profile).where(Profile.username == body.username)
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Username '{body.username}' already taken",
            )

        profile = Profile(
            username=body.username,
            full_name=body.full_name,
            avatar_url=body.avatar_url,
            email=body.email,
        )
        db.add(profile)
        await db.flush()  # get id before commit

        logger.info("Created profile %s (id=%s)", profile.username, profile.id)
        return profile


@router.get("/suggested", response_model=list[ProfileResponse])
async def suggested_profiles(
    db: AsyncSession = Depends(get_db),
    user: Optional[Profile] = Depends(get_optional_user),
):
    return await suggested_for(db, user)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: str, db: AsyncSession = Depends(get_db)):
    profile = await db.get(Profile, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.post("/follow", status_code=status.HTTP_204_NO_CONTENT)
async def follow_user(
    body: FollowRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Create a (current user) → following edge in the social graph."""
    with tracer.start_as_current_span("follow_user"):
        if user.id == body.following_id:
            raise HTTPException(status_code=400, detail="Cannot follow yourself")

        if not await db.get(Profile, body.following_id):
            raise HTTPException(
                status_code=404, detail=f"User {body.following_id} not found"
            )

        existing = await db.get(Follow, (user.id, body.following_id))
        if existing:
            return  # already following

        db.add(Follow(follower_id=user.id, following_id=body.following_id))
        logger.info("%s followed %s", user.id, body.following_id)


@router.post("/unfollow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(
    body: FollowRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with tracer.start_as_current_span("unfollow_user"):
        await db.execute(
            delete(Follow).where(
                Follow.follower_id == user.id,
                Follow.following_id == body.following_id,
            )
        )


@router.get("/{user_id}/followers")
async def list_followers(user_id: str, db: AsyncSession = Depends(get_db)):
    rows = await db.execute(
        select(Follow.follower_id).where(Follow.following_id == user_id)
    )
    return {"user_id": user_id, "followers": [r[0] for r in rows.all()]}
