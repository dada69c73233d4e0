# backend/tests/test_basic.py
import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from backend.app.core.config import AppConfig
from backend.app.db.session import engine_options, normalize_database_url
from backend.app.main import create_app, cors_origins
from backend.app.services.nse_scraper import get_scraper


@pytest.mark.asyncio
async def test_healthcheck(client):
    r = await client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert isinstance(body["message"], str) and body["message"]
    assert body["status"] == "OK"


@pytest.mark.asyncio
async def test_health_needs_no_auth_and_sets_security_headers(client):
    r = await client.get("/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_ping(client):
    r = await client.get("/api/test/ping")
    assert r.status_code == 200
    assert r.json()["message"] == "Frontend-Backend connection test successful"


@pytest.mark.asyncio
async def test_diagnostic_page_is_served(client):
    r = await client.get("/test-api")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "/api/market/summary" in r.text
    assert "localStorage.getItem('token')" in r.text


@pytest.mark.asyncio
async def test_rate_limit_rejects_requests_over_threshold():
    app = create_app(AppConfig(RATE_LIMIT_MAX_REQUESTS=2, RATE_LIMIT_WINDOW_SECONDS=60))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        statuses = [(await ac.get("/health")).status_code for _ in range(3)]
    assert statuses == [200, 200, 429]


@pytest.mark.asyncio
async def test_rate_limit_window_is_shared_by_all_routes(scraper):
    app = create_app(AppConfig(RATE_LIMIT_MAX_REQUESTS=3, RATE_LIMIT_WINDOW_SECONDS=60))
    app.dependency_overrides[get_scraper] = lambda: scraper
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        first = await ac.get("/api/test/ping")
        second = await ac.get("/api/market/summary")
        third = await ac.post("/api/auth/login", json={})
        blocked = await ac.get("/api/market/summary")
    assert [first.status_code, second.status_code, third.status_code] == [200, 200, 422]
    assert blocked.status_code == 429
    assert blocked.json()["detail"] == "Too many requests, please try again later."


@pytest.mark.asyncio
async def test_rate_limit_can_be_disabled():
    app = create_app(AppConfig(RATE_LIMIT_ENABLED=False, RATE_LIMIT_MAX_REQUESTS=1))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        statuses = [(await ac.get("/health")).status_code for _ in range(3)]
    assert statuses == [200, 200, 200]


@pytest.mark.asyncio
async def test_health_reports_app_config():
    app = create_app(AppConfig(ENV="production", PROJECT_NAME="Aiser Staging", RATE_LIMIT_ENABLED=False))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        body = (await ac.get("/health")).json()
    assert body["environment"] == "production"
    assert body["message"] == "Aiser Staging backend is running"


@pytest.mark.asyncio
async def test_market_connection_check(client):
    r = await client.get("/api/test/test-market")
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Market data test successful"
    assert body["data"]["data"]["value"] == 160.13


@pytest.mark.asyncio
async def test_market_connection_check_reports_upstream_failure(app, client, scraper_factory):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    failing = scraper_factory(handler)
    app.dependency_overrides[get_scraper] = lambda: failing

    r = await client.get("/api/test/test-market")
    assert r.status_code == 500
    assert r.json()["success"] is False
    assert "Connection refused" in r.json()["error"]


def test_cors_origins_follow_environment():
    assert cors_origins(AppConfig(ENV="development")) == ["*"]
    prod = AppConfig(ENV="production", FRONTEND_URL="https://app.aiser.example")
    assert cors_origins(prod) == ["https://app.aiser.example"]


def test_database_url_uses_async_driver():
    assert normalize_database_url("postgres://u:p@db/aiser") == "postgresql+asyncpg://u:p@db/aiser"
    assert normalize_database_url("postgresql://u:p@db/aiser") == "postgresql+asyncpg://u:p@db/aiser"
    assert normalize_database_url("sqlite+aiosqlite:///./aiser.db") == "sqlite+aiosqlite:///./aiser.db"
    assert engine_options("sqlite+aiosqlite://")["connect_args"] == {"check_same_thread": False}
    assert engine_options("postgresql+asyncpg://db/aiser")["pool_pre_ping"] is True
