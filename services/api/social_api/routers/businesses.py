"""
Business endpoints:
  POST /businesses      — register a business owned by the caller
  GET  /businesses/{id} — fetch a business
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db
from social_api.deps import get_current_user
from social_api.models import Business, Profile
from social_api.schemas import BusinessCreate, BusinessResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    body: BusinessCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    business = Business(owner_id=user.id, name=body.name, logo_url=body.logo_url)
    db.add(business)
    await db.flush()
    logger.info("Business %s created by %s", business.id, user.id)
    return business


@router.get("/{business_id}", response_model=BusinessResponse)
async def get_business(business_id: str, db: AsyncSession = Depends(get_db)):
    business = await db.get(Business, business_id)
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return business
