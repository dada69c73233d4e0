# backend/app/api/v1/users.py
"""
Users router: investor profile endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from backend.app.core.logger import logger
from backend.app.core.security import get_current_user
from backend.app.db.models import User
from backend.app.db.session import get_session
from backend.app.schemas.users import ProfileOut, ProfileUpdate

router = APIRouter(tags=["users"])


@router.get("/profile")
async def read_profile(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": {"user": ProfileOut.model_validate(current_user).to_json()}}


@router.put("/profile")
async def update_profile(
    updates: ProfileUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    changes = updates.model_dump(exclude_none=True, mode="json")
    # enums and dates are stored in their plain form
    if updates.date_of_birth is not None:
        changes["date_of_birth"] = updates.date_of_birth

    for field, value in changes.items():
        setattr(current_user, field, value)
    current_user.updated_at = datetime.now(timezone.utc)

    session.add(current_user)
    await session.commit()
    await session.refresh(current_user)

    logger.info(f"Updated profile fields {sorted(changes)} for user {current_user.id}")
    return {"success": True, "data": {"user": ProfileOut.model_validate(current_user).to_json()}}
