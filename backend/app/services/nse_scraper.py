"""
NSE (Nairobi Securities Exchange) market data scraper.
- Fetches the public NSE listing page and parses it with BeautifulSoup
- Produces per-stock quotes, the NASI index summary and the daily trading summary
- Derives top gainers, top losers and most active stocks from the parsed quotes
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import List, Optional

from bs4 import BeautifulSoup

from backend.app.core.config import settings
from backend.app.core.logger import logger
from backend.app.schemas.market import MarketSummary, NSEMarketData, NSEStock, TradingSummary
from backend.app.utils.http_client import AsyncHTTPClient, HTTPClientError

SCRAPE_TIMEOUT_S: float = 30.0
TOP_LIMIT: int = 10

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

SYMBOL_RE = re.compile(r"^[A-Z]{2,6}(-[A-Z0-9]+)?$")
INDEX_RE = re.compile(r"(\d+\.\d+)\s*\(\+?(-?\d+\.\d+)\)")
MARKET_CAP_RE = re.compile(r"KES\s*([\d.]+)Tr")
TRADING_RE = re.compile(r"(\d+,\d+,\d+)\s+shares.*?(\d+,?\d*)\s+deals.*?KES\s+([\d,]+)", re.S)
PARTICIPATING_RE = re.compile(r"(\d+)\s+NSE listed equities participated")
GAINERS_LOSERS_RE = re.compile(r"(\d+)\s+gainers.*?(\d+)\s+losers", re.S)

# NASI trades in this band; other "value (change)" pairs on the page are ignored
NASI_MIN = 100.0
NASI_MAX = 300.0

EMPTY_CELL = {"", "—", "-"}


class ScraperError(Exception):
    """Raised when the NSE page cannot be fetched."""
    pass


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_float(text: str) -> Optional[float]:
    try:
        return float(text.replace(",", "").replace("+", ""))
    except ValueError:
        return None


def _to_int(text: str) -> int:
    try:
        return int(text.replace(",", ""))
    except ValueError:
        return 0


def change_percent(value: float, change: float) -> float:
    """Percent change relative to the previous value (value - change)."""
    previous = value - change
    if previous == 0:
        return 0.0
    return change / previous * 100


def parse_stocks(soup: BeautifulSoup, timestamp: str) -> List[NSEStock]:
    stocks: List[NSEStock] = []

    for row in soup.find_all("tr"):
        cells = [td.get_text(strip=True) for td in row.find_all("td")]
        if len(cells) < 4:
            continue

        symbol, name, volume_cell, price_cell = cells[:4]
        change_cell = cells[4] if len(cells) > 4 else ""

        if not SYMBOL_RE.match(symbol) or not name or not price_cell:
            continue

        price = _to_float(price_cell)
        if price is None or price <= 0:
            logger.debug(f"Skipping NSE row {symbol}: unparsable price {price_cell!r}")
            continue

        volume = None if volume_cell in EMPTY_CELL else _to_float(volume_cell)
        change = 0.0 if change_cell in EMPTY_CELL else (_to_float(change_cell) or 0.0)

        stocks.append(
            NSEStock(
                symbol=symbol,
                name=name,
                volume=volume,
                price=price,
                change=change,
                change_percent=change_percent(price, change),
                timestamp=timestamp,
            )
        )

    return stocks


def parse_market_summary(soup: BeautifulSoup, timestamp: str) -> MarketSummary:
    value = 0.0
    change = 0.0

    for element in soup.find_all(["td", "div", "span"]):
        match = INDEX_RE.search(element.get_text(strip=True))
        if not match:
            continue
        candidate = float(match.group(1))
        if NASI_MIN < candidate < NASI_MAX:
            value = candidate
            change = float(match.group(2))

    cap_match = MARKET_CAP_RE.search(soup.get_text(" "))
    market_cap = f"KES {cap_match.group(1)} Trillion" if cap_match else None

    return MarketSummary(
        index="NASI",
        value=value,
        change=change,
        change_percent=change_percent(value, change) if value else 0.0,
        market_cap=market_cap,
        timestamp=timestamp,
    )


def parse_trading_summary(soup: BeautifulSoup) -> TradingSummary:
    text = soup.get_text(" ")
    summary = TradingSummary()

    match = TRADING_RE.search(text)
    if match:
        summary.total_shares = _to_int(match.group(1))
        summary.total_deals = _to_int(match.group(2))
        summary.total_value = _to_int(match.group(3))

    match = PARTICIPATING_RE.search(text)
    if match:
        summary.participating_equities = _to_int(match.group(1))

    match = GAINERS_LOSERS_RE.search(text)
    if match:
        summary.gainers = _to_int(match.group(1))
        summary.losers = _to_int(match.group(2))

    return summary


def top_gainers(stocks: List[NSEStock], limit: int = TOP_LIMIT) -> List[NSEStock]:
    rising = [s for s in stocks if s.change_percent > 0]
    return sorted(rising, key=lambda s: s.change_percent, reverse=True)[:limit]


def top_losers(stocks: List[NSEStock], limit: int = TOP_LIMIT) -> List[NSEStock]:
    falling = [s for s in stocks if s.change_percent < 0]
    return sorted(falling, key=lambda s: s.change_percent)[:limit]


def most_active(stocks: List[NSEStock], limit: int = TOP_LIMIT) -> List[NSEStock]:
    traded = [s for s in stocks if s.volume is not None]
    return sorted(traded, key=lambda s: s.volume, reverse=True)[:limit]


def search_stocks(stocks: List[NSEStock], query: str) -> List[NSEStock]:
    term = query.lower()
    return [s for s in stocks if term in s.symbol.lower() or term in s.name.lower()]


def parse_page(html: str) -> NSEMarketData:
    soup = BeautifulSoup(html, "html.parser")
    timestamp = _now_iso()
    stocks = parse_stocks(soup, timestamp)

    return NSEMarketData(
        stocks=stocks,
        market_summary=parse_market_summary(soup, timestamp),
        top_gainers=top_gainers(stocks),
        top_losers=top_losers(stocks),
        most_active=most_active(stocks),
        trading_summary=parse_trading_summary(soup),
    )


class NSEScraper:
    source = "NSE Web Scraper"

    def __init__(self, client: Optional[AsyncHTTPClient] = None):
        self.client = client or AsyncHTTPClient(
            base_url=settings.NSE_SCRAPER_URL,
            timeout=SCRAPE_TIMEOUT_S,
        )

    async def scrape(self) -> NSEMarketData:
        logger.info("Scraping NSE data")
        try:
            response = await self.client.get(headers=BROWSER_HEADERS)
        except HTTPClientError as e:
            logger.error(f"Error scraping NSE data: {e}")
            raise ScraperError(f"Failed to scrape NSE data: {e}") from e

        data = parse_page(response.text)
        logger.info(f"Scraped {len(data.stocks)} NSE stocks")
        return data

    async def get_stock(self, symbol: str) -> Optional[NSEStock]:
        data = await self.scrape()
        return next((s for s in data.stocks if s.symbol == symbol), None)


nse_scraper = NSEScraper()


def get_scraper() -> NSEScraper:
    """FastAPI dependency returning the shared scraper."""
    return nse_scraper
