# backend/app/api/v1/portfolio.py
"""
Portfolio endpoints: holdings owned by the authenticated user and their valuation.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import select

from backend.app.core.logger import logger
from backend.app.core.security import get_current_user
from backend.app.db.models import Holding, User
from backend.app.db.session import get_session
from backend.app.schemas.portfolio import HoldingCreate, HoldingOut

router = APIRouter(tags=["portfolio"])


def summarize(holdings: List[Holding]) -> dict:
    """Value holdings at their last known price, falling back to cost."""
    cost = sum(h.quantity * h.average_price for h in holdings)
    value = sum(
        h.quantity * (h.current_price if h.current_price is not None else h.average_price)
        for h in holdings
    )
    gain = value - cost
    return {
        "totalValue": value,
        "totalGain": gain,
        "totalGainPercent": 0.0 if cost == 0 else gain / cost * 100,
        "holdings": [HoldingOut.model_validate(h).to_json() for h in holdings],
    }


@router.get("")
async def get_portfolio(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = await session.execute(
        select(Holding).where(Holding.user_id == current_user.id).order_by(Holding.created_at)
    )
    holdings = result.scalars().all()
    return {"success": True, "data": summarize(holdings)}


@router.post("/holdings", status_code=201)
async def add_holding(
    payload: HoldingCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    holding = Holding(user_id=current_user.id, **payload.model_dump())
    session.add(holding)
    await session.commit()
    await session.refresh(holding)

    logger.info(f"User {current_user.id} added holding {holding.symbol} x{holding.quantity}")
    return {
        "success": True,
        "message": "Holding added successfully",
        "data": HoldingOut.model_validate(holding).to_json(),
    }
