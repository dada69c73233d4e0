# backend/app/schemas/ai.py
from typing import List, Optional

from pydantic import Field

from backend.app.db.models import RiskTolerance
from backend.app.schemas.base import CamelModel
from backend.app.schemas.portfolio import HoldingCreate


class InvestmentAdviceRequest(CamelModel):
    investment_amount: Optional[float] = Field(default=None, ge=0)
    risk_tolerance: Optional[RiskTolerance] = None
    goals: Optional[List[str]] = None


class PortfolioAnalysisRequest(CamelModel):
    # omitted: analyse the holdings stored for the user
    holdings: Optional[List[HoldingCreate]] = None


class AssetAllocation(CamelModel):
    stocks: int
    bonds: int
    commodities: int


class SuggestedStock(CamelModel):
    symbol: str
    name: str
    allocation: int
    amount: Optional[float] = None


class InvestmentAdvice(CamelModel):
    recommendation: str
    reasoning: str
    allocation: AssetAllocation
    suggested_stocks: List[SuggestedStock]
    expected_return: float
    risk_level: RiskTolerance
    goals: List[str] = []


class RebalanceRecommendation(CamelModel):
    symbol: str
    current_allocation: float
    suggested_allocation: float


class PortfolioAnalysis(CamelModel):
    overall_score: float
    diversification_score: float
    risk_score: float
    performance_score: float
    suggestions: List[str]
    rebalance_recommendations: List[RebalanceRecommendation]


class OpportunityStock(CamelModel):
    symbol: str
    reason: str


class MarketInsights(CamelModel):
    market_trend: str
    key_insights: List[str]
    opportunity_stocks: List[OpportunityStock]
    risk_factors: List[str]
