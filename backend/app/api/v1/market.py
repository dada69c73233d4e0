# backend/app/api/v1/market.py
"""
Market data API endpoints for the Nairobi Securities Exchange.
Quotes, index summary and movers come from the NSE scraper; sector and index
breakdowns come from the RapidAPI NSE provider when a key is configured.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.app.core.logger import logger
from backend.app.schemas.market import NSEMarketData, NSEStock
from backend.app.services.nse_api import NSEApiService, get_nse_api
from backend.app.services.nse_scraper import NSEScraper, ScraperError, get_scraper, search_stocks

router = APIRouter(tags=["Market"])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def fetch_market_data(scraper: NSEScraper, what: str) -> NSEMarketData:
    try:
        return await scraper.scrape()
    except ScraperError as e:
        logger.error(f"Error fetching {what}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to fetch {what}: {e}")


def _stock_list(stocks: List[NSEStock], source: str, **extra: Any) -> Dict[str, Any]:
    return {
        "success": True,
        "data": [s.to_json() for s in stocks],
        **extra,
        "timestamp": _now_iso(),
        "source": source,
        "count": len(stocks),
    }


@router.get("/summary")
async def get_market_summary(scraper: NSEScraper = Depends(get_scraper)) -> Dict[str, Any]:
    """NASI index snapshot plus the day's trading summary."""
    data = await fetch_market_data(scraper, "market summary")
    return {
        "success": True,
        "data": {
            **data.market_summary.to_json(),
            "tradingSummary": data.trading_summary.to_json(),
        },
        "timestamp": _now_iso(),
        "source": scraper.source,
    }


@router.get("/nse/stocks")
async def get_nse_stocks(scraper: NSEScraper = Depends(get_scraper)) -> Dict[str, Any]:
    data = await fetch_market_data(scraper, "NSE stocks")
    return _stock_list(data.stocks, scraper.source)


@router.get("/stock/{symbol}")
async def get_stock(symbol: str, scraper: NSEScraper = Depends(get_scraper)) -> Dict[str, Any]:
    data = await fetch_market_data(scraper, "stock data")
    wanted = symbol.upper()
    stock = next((s for s in data.stocks if s.symbol == wanted), None)
    if stock is None:
        raise HTTPException(status_code=404, detail=f"Stock {symbol} not found")

    return {
        "success": True,
        "data": stock.to_json(),
        "timestamp": _now_iso(),
        "source": scraper.source,
    }


@router.get("/stock/{symbol}/history")
async def get_stock_history(
    symbol: str,
    period: str = Query("1M", description="History window, e.g. 1W, 1M, 1Y"),
) -> Dict[str, Any]:
    # the NSE listing page only carries the current session, so there is no history to serve
    return {
        "success": True,
        "data": [],
        "message": f"No historical data available for {symbol.upper()} ({period}). No data source configured.",
    }


@router.get("/gainers")
async def get_top_gainers(scraper: NSEScraper = Depends(get_scraper)) -> Dict[str, Any]:
    data = await fetch_market_data(scraper, "top gainers")
    return _stock_list(data.top_gainers, scraper.source)


@router.get("/losers")
async def get_top_losers(scraper: NSEScraper = Depends(get_scraper)) -> Dict[str, Any]:
    data = await fetch_market_data(scraper, "top losers")
    return _stock_list(data.top_losers, scraper.source)


@router.get("/active")
async def get_most_active(scraper: NSEScraper = Depends(get_scraper)) -> Dict[str, Any]:
    data = await fetch_market_data(scraper, "most active stocks")
    return _stock_list(data.most_active, scraper.source)


@router.get("/search")
async def search(
    q: Optional[str] = Query(None, description="Symbol or company name fragment"),
    scraper: NSEScraper = Depends(get_scraper),
) -> Dict[str, Any]:
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    data = await fetch_market_data(scraper, "search results")
    return _stock_list(search_stocks(data.stocks, q.strip()), scraper.source, query=q)


@router.get("/sector/{sector}")
async def get_sector(sector: str, nse_api: NSEApiService = Depends(get_nse_api)) -> Dict[str, Any]:
    if not nse_api.configured:
        return {
            "success": True,
            "data": [],
            "message": f'No stocks available for sector "{sector}". No data source configured.',
        }

    stocks = await nse_api.get_stocks_by_sector(sector)
    return {"success": True, "data": stocks, "count": len(stocks), "timestamp": _now_iso()}


@router.get("/indices")
async def get_indices(nse_api: NSEApiService = Depends(get_nse_api)) -> Dict[str, Any]:
    indices = await nse_api.get_indices()
    return {"success": indices is not None, "data": indices, "timestamp": _now_iso()}
