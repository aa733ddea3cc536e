from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db
from social_api.deps import get_optional_user
from social_api.models import Business, Profile
from social_api.routers.feed import build_feed
from social_api.routers.users import suggested_for
from social_api.schemas import FeedTab

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    tab: FeedTab = Query(FeedTab.FOR_YOU),
    db: AsyncSession = Depends(get_db),
    user: Optional[Profile] = Depends(get_optional_user),
):
    view = await build_feed(db, user, tab)
    businesses = []
    if user is not None:
        rows = await db.execute(
            select(Business).where(Business.owner_id == user.id).order_by(Business.name)
        )
        businesses = list(rows.scalars().all())
    return request.app.state.tpl.TemplateResponse(
        request,
        "home.html",
        {
            "page": view.render(),
            "user": user,
            "businesses": businesses,
            "suggested": await suggested_for(db, user),
        },
    )
