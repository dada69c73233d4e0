# backend/app/schemas/market.py
from typing import List, Optional

from backend.app.schemas.base import CamelModel


class NSEStock(CamelModel):
    symbol: str
    name: str
    volume: Optional[float] = None
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    timestamp: str


class TradingSummary(CamelModel):
    total_shares: int = 0
    total_deals: int = 0
    total_value: int = 0
    participating_equities: int = 0
    gainers: int = 0
    losers: int = 0


class MarketSummary(CamelModel):
    index: str = "NASI"
    value: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    market_cap: Optional[str] = None
    timestamp: str


class NSEMarketData(CamelModel):
    stocks: List[NSEStock]
    market_summary: MarketSummary
    top_gainers: List[NSEStock]
    top_losers: List[NSEStock]
    most_active: List[NSEStock]
    trading_summary: TradingSummary
