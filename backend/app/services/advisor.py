# backend/app/services/advisor.py
"""
Rule-based investment advisor for NSE investors.
- Allocation advice per risk tolerance (stocks / bonds / commodities and a stock basket)
- Portfolio analysis: concentration (Herfindahl index), position caps and gain vs cost
- Market insights from a scraped NSE session
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from backend.app.db.models import RiskTolerance
from backend.app.schemas.ai import (
    AssetAllocation,
    InvestmentAdvice,
    MarketInsights,
    OpportunityStock,
    PortfolioAnalysis,
    RebalanceRecommendation,
    SuggestedStock,
)
from backend.app.schemas.market import NSEMarketData

MIN_HOLDINGS = 5
INSIGHT_LIMIT = 3

# largest share of the portfolio one stock should take
POSITION_CAPS: Dict[RiskTolerance, float] = {
    RiskTolerance.conservative: 0.20,
    RiskTolerance.moderate: 0.30,
    RiskTolerance.aggressive: 0.40,
}

PROFILES = {
    RiskTolerance.conservative: {
        "allocation": AssetAllocation(stocks=30, bonds=60, commodities=10),
        "expected_return": 8.0,
        "reasoning": (
            "Capital preservation comes first: government bonds carry most of the portfolio "
            "and equity exposure stays in established dividend payers."
        ),
        "stocks": [
            ("KCB", "KCB Group", 10),
            ("EQTY", "Equity Group Holdings", 10),
            ("EABL", "East African Breweries", 10),
        ],
    },
    RiskTolerance.moderate: {
        "allocation": AssetAllocation(stocks=60, bonds=30, commodities=10),
        "expected_return": 12.5,
        "reasoning": (
            "Based on your risk tolerance and investment goals, this allocation provides "
            "good balance between growth and stability."
        ),
        "stocks": [
            ("SCOM", "Safaricom", 20),
            ("EQTY", "Equity Group Holdings", 15),
            ("KCB", "KCB Group", 10),
            ("EABL", "East African Breweries", 15),
        ],
    },
    RiskTolerance.aggressive: {
        "allocation": AssetAllocation(stocks=80, bonds=15, commodities=5),
        "expected_return": 16.0,
        "reasoning": (
            "Long-term growth is the priority: most of the portfolio sits in liquid NSE "
            "blue chips, accepting larger swings in value."
        ),
        "stocks": [
            ("SCOM", "Safaricom", 30),
            ("EQTY", "Equity Group Holdings", 20),
            ("KCB", "KCB Group", 15),
            ("COOP", "Co-operative Bank of Kenya", 15),
        ],
    },
}


def _clamp(value: float, low: float = 0.0, high: float = 10.0) -> float:
    return max(low, min(high, value))


def _market_value(holding) -> float:
    price = holding.current_price if holding.current_price is not None else holding.average_price
    return holding.quantity * price


def investment_advice(
    risk_tolerance: RiskTolerance,
    investment_amount: Optional[float] = None,
    goals: Optional[List[str]] = None,
) -> InvestmentAdvice:
    risk = RiskTolerance(risk_tolerance)
    profile = PROFILES[risk]
    allocation: AssetAllocation = profile["allocation"]

    suggested = [
        SuggestedStock(
            symbol=symbol,
            name=name,
            allocation=weight,
            amount=round(investment_amount * weight / 100, 2) if investment_amount else None,
        )
        for symbol, name, weight in profile["stocks"]
    ]

    return InvestmentAdvice(
        recommendation=(
            f"Diversified portfolio with {allocation.stocks}% stocks, "
            f"{allocation.bonds}% bonds, {allocation.commodities}% commodities"
        ),
        reasoning=profile["reasoning"],
        allocation=allocation,
        suggested_stocks=suggested,
        expected_return=profile["expected_return"],
        risk_level=risk,
        goals=list(goals or []),
    )


def analyze_portfolio(holdings: Iterable, risk_tolerance: RiskTolerance) -> PortfolioAnalysis:
    """Score a set of holdings (anything with symbol, quantity, average_price, current_price).

    Scores run from 0 to 10. Diversification is 10 * (1 - HHI) over position weights,
    risk grows with the largest position relative to the profile's cap, and
    performance is 5 shifted by a quarter point per percent of gain over cost.
    """
    risk = RiskTolerance(risk_tolerance)
    cap = POSITION_CAPS[risk]

    values: Dict[str, float] = defaultdict(float)
    cost = 0.0
    for h in holdings:
        values[h.symbol] += _market_value(h)
        cost += h.quantity * h.average_price

    total = sum(values.values())
    if total <= 0:
        return PortfolioAnalysis(
            overall_score=0.0,
            diversification_score=0.0,
            risk_score=0.0,
            performance_score=0.0,
            suggestions=["Add holdings to your portfolio to get an analysis"],
            rebalance_recommendations=[],
        )

    weights = {symbol: value / total for symbol, value in values.items()}
    hhi = sum(w * w for w in weights.values())
    gain_pct = (total - cost) / cost * 100 if cost else 0.0

    diversification = round((1 - hhi) * 10, 1)
    risk_score = round(_clamp(5 * max(weights.values()) / cap), 1)
    performance = round(_clamp(5 + gain_pct / 4), 1)
    overall = round((diversification + (10 - risk_score) + performance) / 3, 1)

    over_cap = sorted(
        ((symbol, w) for symbol, w in weights.items() if w > cap),
        key=lambda item: item[1],
        reverse=True,
    )

    suggestions: List[str] = []
    if len(weights) < MIN_HOLDINGS:
        suggestions.append(
            f"Hold at least {MIN_HOLDINGS} stocks to spread company-specific risk (you hold {len(weights)})"
        )
    for symbol, w in over_cap:
        suggestions.append(
            f"{symbol} is {w * 100:.1f}% of your portfolio, above the {cap * 100:.0f}% limit "
            f"for a {risk.value} investor"
        )
    if gain_pct < 0:
        suggestions.append("Your holdings are below cost; review the positions with the largest losses")
    if not suggestions:
        suggestions.append("Your portfolio is well balanced for your risk profile")

    return PortfolioAnalysis(
        overall_score=overall,
        diversification_score=diversification,
        risk_score=risk_score,
        performance_score=performance,
        suggestions=suggestions,
        rebalance_recommendations=[
            RebalanceRecommendation(
                symbol=symbol,
                current_allocation=round(w * 100, 1),
                suggested_allocation=round(cap * 100, 1),
            )
            for symbol, w in over_cap
        ],
    )


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def market_insights(data: NSEMarketData) -> MarketInsights:
    summary = data.market_summary
    trading = data.trading_summary

    gainers, losers = trading.gainers, trading.losers
    if not gainers and not losers:
        gainers = sum(1 for s in data.stocks if s.change > 0)
        losers = sum(1 for s in data.stocks if s.change < 0)

    score = _sign(summary.change) + _sign(gainers - losers)
    trend = "bullish" if score > 0 else "bearish" if score < 0 else "neutral"

    insights: List[str] = []
    if summary.value:
        insights.append(f"{summary.index} at {summary.value:.2f}, {summary.change_percent:+.2f}% on the session")
    insights.append(f"{gainers} gainers against {losers} losers")
    if trading.total_deals:
        insights.append(f"{trading.total_deals:,} deals worth KES {trading.total_value:,}")
    if data.most_active:
        leader = data.most_active[0]
        insights.append(f"{leader.symbol} is the most traded stock ({leader.volume:,.0f} shares)")

    risks = [
        f"{s.symbol} down {abs(s.change_percent):.2f}% at KES {s.price:.2f}"
        for s in data.top_losers[:INSIGHT_LIMIT]
    ]
    if losers > gainers:
        risks.append("Decliners outnumber advancers across the market")

    return MarketInsights(
        market_trend=trend,
        key_insights=insights,
        opportunity_stocks=[
            OpportunityStock(symbol=s.symbol, reason=f"Up {s.change_percent:.2f}% at KES {s.price:.2f}")
            for s in data.top_gainers[:INSIGHT_LIMIT]
        ],
        risk_factors=risks,
    )
