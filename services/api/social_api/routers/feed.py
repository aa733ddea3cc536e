"""
Feed retrieval endpoint — GET /feed?tab=for-you|following

Builds a FeedView for the caller, lets it finish auth (which triggers the
refresh) and returns the rendered page state. Fetch errors never surface
here: the view logs them and renders the tab's empty state.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db
from social_api.deps import get_optional_user
from social_api.feed import FeedRepository, FeedView
from social_api.models import Profile
from social_api.schemas import FeedPage, FeedTab

logger = logging.getLogger(__name__)
router = APIRouter()


async def build_feed(db: AsyncSession, user: Optional[Profile], tab: FeedTab) -> FeedView:
    view = FeedView(FeedRepository(db), tab=tab)
    await view.finish_auth(user)
    return view


@router.get("", response_model=FeedPage)
async def get_feed(
    tab: FeedTab = Query(FeedTab.FOR_YOU, description="Timeline to show"),
    db: AsyncSession = Depends(get_db),
    user: Optional[Profile] = Depends(get_optional_user),
):
    view = await build_feed(db, user, tab)
    page = view.render()
    logger.debug(
        "Feed served (tab=%s, user=%s, posts=%d)",
        tab.value, user.id if user else None, len(page.posts),
    )
    return page
