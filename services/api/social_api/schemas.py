"""
Pydantic request / response schemas for the API layer.
Kept separate from ORM models to avoid coupling transport to storage.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


# ──────────────────────────── Profiles ────────────────────────────────────

class ProfileCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    username: Optional[str]
    full_name: Optional[str]
    avatar_url: Optional[str]
    email_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class FollowRequest(BaseModel):
    following_id: str


# ──────────────────────────── Businesses ──────────────────────────────────

class BusinessCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    logo_url: Optional[str] = None


class BusinessResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    logo_url: Optional[str]

    class Config:
        from_attributes = True


# ──────────────────────────── Posts ───────────────────────────────────────

class PostCreate(BaseModel):
    content: Optional[str] = None
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None
    instagram_url: Optional[str] = None
    business_id: Optional[str] = None

    @model_validator(mode="after")
    def _has_body(self) -> "PostCreate":
        if self.content is not None and not self.content.strip():
            self.content = None
        if not any((self.content, self.image_url, self.youtube_url, self.instagram_url)):
            raise ValueError("A post needs content or a media link")
        return self


class AuthorSummary(BaseModel):
    id: str
    full_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class BusinessSummary(BaseModel):
    id: str
    name: str
    logo_url: Optional[str] = None

    class Config:
        from_attributes = True


class FeedPost(BaseModel):
    """A post hydrated with its author, business and engagement counts."""
    id: str
    user_id: str
    business_id: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None
    instagram_url: Optional[str] = None
    created_at: datetime
    author: Optional[AuthorSummary] = None
    business: Optional[BusinessSummary] = None
    like_user_ids: list[str] = []
    like_count: int = 0
    comment_count: int = 0


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


# ──────────────────────────── Feed ────────────────────────────────────────

class FeedTab(str, Enum):
    FOR_YOU = "for-you"
    FOLLOWING = "following"


class TabState(BaseModel):
    value: FeedTab
    label: str
    enabled: bool
    active: bool


class FeedPage(BaseModel):
    """What the home page shows for the current view state."""
    tab: FeedTab
    tabs: list[TabState]
    auth_pending: bool = False
    loading: bool = False
    placeholders: int = 0
    posts: list[FeedPost] = []
    empty_message: Optional[str] = None
    can_post: bool = False
