"""
Client for the NSE market-data API published on the RapidAPI gateway.
Every call degrades to an empty result when the gateway is unreachable or no key is configured.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from backend.app.core.config import settings
from backend.app.core.logger import logger
from backend.app.utils.http_client import AsyncHTTPClient, HTTPClientError, safe_json_response


class NSEApiService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        host: Optional[str] = None,
        client: Optional[AsyncHTTPClient] = None,
    ):
        self.base_url = base_url or settings.NSE_API_URL
        self.api_key = api_key if api_key is not None else settings.RAPIDAPI_KEY
        self.host = host or settings.NSE_API_HOST
        self.client = client or AsyncHTTPClient(base_url=self.base_url, timeout=15.0)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "X-RapidAPI-Key": self.api_key or "",
            "X-RapidAPI-Host": self.host,
        }

    async def _get(self, path: str) -> Any:
        if not self.configured:
            logger.debug(f"RapidAPI key not configured, skipping {path}")
            return None
        try:
            response = await self.client.get(path, headers=self._headers())
        except HTTPClientError as e:
            logger.error(f"Error fetching NSE API {path}: {e}")
            return None
        return safe_json_response(response)

    async def _get_list(self, path: str) -> List[Dict[str, Any]]:
        data = await self._get(path)
        return data if isinstance(data, list) else []

    async def get_all_stocks(self) -> List[Dict[str, Any]]:
        return await self._get_list("/stocks")

    async def get_stock(self, symbol: str) -> Optional[Dict[str, Any]]:
        return await self._get(f"/stock/{symbol}")

    async def get_market_data(self) -> Optional[Dict[str, Any]]:
        return await self._get("/market-data")

    async def get_indices(self) -> Optional[Any]:
        return await self._get("/indices")

    async def get_top_gainers(self) -> List[Dict[str, Any]]:
        return await self._get_list("/top-gainers")

    async def get_top_losers(self) -> List[Dict[str, Any]]:
        return await self._get_list("/top-losers")

    async def get_most_active(self) -> List[Dict[str, Any]]:
        return await self._get_list("/most-active")

    async def get_stocks_by_sector(self, sector: str) -> List[Dict[str, Any]]:
        return await self._get_list(f"/sector/{sector}")


nse_api = NSEApiService()


def get_nse_api() -> NSEApiService:
    return nse_api
