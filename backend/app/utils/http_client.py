"""
Async HTTP client used by the upstream market-data providers.
- Retries 5xx responses with exponential backoff
- Normalizes network failures into HTTPClientError
"""

from typing import Any, Dict, Optional
from urllib.parse import urljoin

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from backend.app.core.logger import logger

DEFAULT_HEADERS = {
    "User-Agent": "Aiser/1.0",
    "Accept": "application/json",
}


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class TransientHTTPError(HTTPClientError):
    """Raised on 5xx responses to trigger retry."""
    pass


class AsyncHTTPClient:
    """Async HTTP client with retry logic."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or dict(DEFAULT_HEADERS)
        self.transport = transport

    def _full_url(self, url: str) -> str:
        if not self.base_url:
            return url
        return urljoin(self.base_url.rstrip("/") + "/", url.lstrip("/"))

    @retry(
        retry=retry_if_exception_type(TransientHTTPError),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def get(
        self,
        url: str = "",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Make an async GET request with retry logic."""
        full_url = self._full_url(url)
        request_headers = {**self.default_headers, **(headers or {})}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(full_url, params=params, headers=request_headers)
        except httpx.RequestError as e:
            logger.error(f"Request error for {full_url}: {e}")
            raise HTTPClientError(f"Request failed: {e}") from e

        if response.status_code in (500, 502, 503, 504):
            logger.warning(f"Transient {response.status_code} from {full_url}")
            raise TransientHTTPError(f"{response.status_code} for {full_url}")
        if response.is_error:
            raise HTTPClientError(f"{response.status_code} {response.reason_phrase} for {full_url}")
        return response


def safe_json_response(response: httpx.Response) -> Any:
    """Safely extract JSON from response, returning None on error."""
    try:
        return response.json()
    except ValueError as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        return None
