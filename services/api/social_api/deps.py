"""
Request-scoped auth context.

The hosted auth provider resolves the session in front of this API and
forwards the signed-in profile id as the X-User-Id header. Handlers receive
the resolved profile as an explicit dependency; nothing here is global.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db
from social_api.models import Profile


async def get_optional_user(
    x_user_id: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> Optional[Profile]:
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    return await db.get(Profile, user_id)


async def get_current_user(
    user: Optional[Profile] = Depends(get_optional_user),
) -> Profile:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required.",
        )
    return user
