"""
Tests for the diagnostic controller that mirrors the /test-api page.
"""

import httpx
import pytest

from backend.app.diagnostics import DiagnosticController, Panel, TokenStore


def transport(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        return routes[request.url.path]
    return httpx.MockTransport(handler)


def unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)
    return httpx.MockTransport(handler)


@pytest.fixture
def store(tmp_path):
    return TokenStore(tmp_path / "token")


def test_health_ok(store):
    controller = DiagnosticController(
        token_store=store,
        transport=transport({"/health": httpx.Response(200, json={"message": "OK"})}),
    )
    assert controller.check_health() == Panel("success", "✅ Backend is running: OK")


def test_market_ok(store):
    controller = DiagnosticController(
        token_store=store,
        transport=transport({"/api/market/summary": httpx.Response(200, json={"data": {"value": 1850.42}})}),
    )
    assert controller.check_market() == Panel("success", "✅ Market data available: NSE 1850.42")


def test_unreachable_server_renders_error_panels(store):
    controller = DiagnosticController(token_store=store, transport=unreachable())
    assert controller.check_health() == Panel("error", "❌ Backend connection failed: Connection refused")
    assert controller.check_market() == Panel("error", "❌ Market data failed: Connection refused")


def test_non_success_status_is_a_failure(store):
    controller = DiagnosticController(
        token_store=store,
        transport=transport({
            "/health": httpx.Response(503, json={"detail": "maintenance"}),
            "/api/market/summary": httpx.Response(502, text="bad gateway"),
        }),
    )
    assert controller.check_health().text == "❌ Backend connection failed: maintenance"
    assert controller.check_market().text == "❌ Market data failed: Bad Gateway"


def test_auth_check_is_presence_only(store):
    controller = DiagnosticController(token_store=store, transport=unreachable())
    assert controller.check_auth() == Panel("info", "ℹ️ No auth token found - please log in")

    store.set("not-even-a-jwt")
    assert controller.check_auth() == Panel("success", "✅ Auth token found")

    store.clear()
    assert store.get() is None


def test_on_load_runs_checks_independently(store):
    store.set("token")
    controller = DiagnosticController(token_store=store, transport=unreachable())
    panels = controller.on_load()
    assert panels["health"].kind == "error"
    assert panels["auth"] == Panel("success", "✅ Auth token found")


def test_navigation_targets(store):
    controller = DiagnosticController(token_store=store)
    assert controller.navigate("/auth") == "/auth"
    assert controller.navigate("/dashboard") == "/dashboard"
    assert controller.location == "/dashboard"
    with pytest.raises(ValueError):
        controller.navigate("/dashboard?next=1")
