"""
Diagnostic checks against a running Aiser backend.

Mirrors the /test-api page: the health and auth checks run on load, the market
check runs on demand, and every check renders its own panel. A failing check
never prevents the others from running.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import httpx

from backend.app.core.logger import logger

NAVIGATION_TARGETS = ("/auth", "/dashboard")
DEFAULT_TOKEN_FILE = Path.home() / ".aiser" / "token"


@dataclass(frozen=True)
class Panel:
    kind: str  # success | error | info
    text: str


class TokenStore:
    """File-backed stand-in for the browser's `token` local-storage key."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or os.getenv("AISER_TOKEN_FILE", DEFAULT_TOKEN_FILE))

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8").strip() or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict):
        message = body.get("detail") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return response.reason_phrase or f"HTTP {response.status_code}"


class DiagnosticController:
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        token_store: Optional[TokenStore] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.token_store = token_store or TokenStore()
        self.timeout = timeout
        self.transport = transport
        self.location: Optional[str] = None

    def _get_json(self, path: str) -> dict:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            response = client.get(path)
        if response.is_error:
            raise RuntimeError(_error_text(response))
        return response.json()

    def check_health(self) -> Panel:
        try:
            body = self._get_json("/health")
            return Panel("success", f"✅ Backend is running: {body['message']}")
        except Exception as e:
            logger.warning(f"Health check failed: {e}")
            return Panel("error", f"❌ Backend connection failed: {e}")

    def check_market(self) -> Panel:
        try:
            body = self._get_json("/api/market/summary")
            return Panel("success", f"✅ Market data available: NSE {body['data']['value']}")
        except Exception as e:
            logger.warning(f"Market check failed: {e}")
            return Panel("error", f"❌ Market data failed: {e}")

    def check_auth(self) -> Panel:
        # presence only, the token is never decoded here
        if self.token_store.get():
            return Panel("success", "✅ Auth token found")
        return Panel("info", "ℹ️ No auth token found - please log in")

    def on_load(self) -> Dict[str, Panel]:
        return {"health": self.check_health(), "auth": self.check_auth()}

    def navigate(self, target: str) -> str:
        if target not in NAVIGATION_TARGETS:
            raise ValueError(f"Unknown navigation target: {target}")
        self.location = target
        return target
