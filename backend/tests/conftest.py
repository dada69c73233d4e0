# backend/tests/conftest.py
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from backend.app.core.config import AppConfig
from backend.app.db import models  # noqa: F401  (registers tables)
from backend.app.db.session import get_session
from backend.app.main import create_app
from backend.app.services.nse_scraper import NSEScraper, get_scraper
from backend.app.utils.http_client import AsyncHTTPClient

FIXTURES = Path(__file__).parent / "fixtures"
SCRAPER_URL = "https://nse.example.com/nse/"


@pytest.fixture
def nse_html() -> str:
    return (FIXTURES / "nse_page.html").read_text(encoding="utf-8")


def make_scraper(handler) -> NSEScraper:
    """Scraper whose upstream requests are answered by `handler`."""
    client = AsyncHTTPClient(base_url=SCRAPER_URL, transport=httpx.MockTransport(handler))
    return NSEScraper(client=client)


@pytest.fixture
def scraper(nse_html) -> NSEScraper:
    return make_scraper(lambda request: httpx.Response(200, text=nse_html))


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(test_engine):
    async with AsyncSession(test_engine, expire_on_commit=False) as s:
        yield s


@pytest.fixture
def app(session, scraper):
    """App with the DB session and the NSE scraper overridden."""
    application = create_app(AppConfig(RATE_LIMIT_ENABLED=False))

    async def _get_test_session():
        yield session

    application.dependency_overrides[get_session] = _get_test_session
    application.dependency_overrides[get_scraper] = lambda: scraper
    return application


@pytest_asyncio.fixture
async def client(app):
    """HTTPX AsyncClient bound to the app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def register_user(client, email="jane@example.com", password="secret123", **extra) -> dict:
    payload = {"firstName": "Jane", "lastName": "Doe", "email": email, "password": password, **extra}
    r = await client.post("/api/auth/register", json=payload)
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest_asyncio.fixture
async def auth_headers(client) -> dict:
    data = await register_user(client)
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def register():
    return register_user


@pytest.fixture
def scraper_factory():
    return make_scraper
