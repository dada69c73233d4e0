# backend/app/api/v1/ai.py
"""
AI advisory endpoints: allocation advice, portfolio analysis and market insights.
All routes require an authenticated user; defaults come from the user's profile.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlmodel.ext.asyncio.session import AsyncSession

from backend.app.api.v1.market import fetch_market_data
from backend.app.core.logger import logger
from backend.app.core.security import get_current_user
from backend.app.db.models import Holding, User
from backend.app.db.session import get_session
from backend.app.schemas.ai import InvestmentAdviceRequest, PortfolioAnalysisRequest
from backend.app.services.advisor import analyze_portfolio, investment_advice, market_insights
from backend.app.services.nse_scraper import NSEScraper, get_scraper

router = APIRouter(tags=["AI"])


@router.post("/investment-advice")
async def get_investment_advice(
    payload: InvestmentAdviceRequest,
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    risk = payload.risk_tolerance or current_user.risk_tolerance
    goals = payload.goals if payload.goals is not None else current_user.investment_goals

    advice = investment_advice(risk, payload.investment_amount, goals)
    logger.info(f"Investment advice for user {current_user.id} ({advice.risk_level.value})")
    return {"success": True, "data": advice.to_json()}


@router.post("/portfolio-analysis")
async def get_portfolio_analysis(
    payload: Optional[PortfolioAnalysisRequest] = None,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    if payload is not None and payload.holdings is not None:
        holdings = payload.holdings
    else:
        result = await session.execute(select(Holding).where(Holding.user_id == current_user.id))
        holdings = result.scalars().all()

    analysis = analyze_portfolio(holdings, current_user.risk_tolerance)
    logger.info(f"Portfolio analysis for user {current_user.id}: score {analysis.overall_score}")
    return {"success": True, "data": analysis.to_json()}


@router.get("/market-insights")
async def get_market_insights(
    scraper: NSEScraper = Depends(get_scraper),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    data = await fetch_market_data(scraper, "market insights")
    return {"success": True, "data": market_insights(data).to_json(), "source": scraper.source}
