# backend/app/api/v1/system.py
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, JSONResponse

from backend.app.api.v1.market import get_market_summary
from backend.app.core.config import AppConfig
from backend.app.services.nse_scraper import NSEScraper, get_scraper

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"

router = APIRouter(tags=["system"])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health_check(request: Request):
    config: AppConfig = request.app.state.config
    return {
        "status": "OK",
        "message": f"{config.PROJECT_NAME} backend is running",
        "timestamp": _now_iso(),
        "environment": config.ENV,
    }


@router.get("/api/test/ping")
async def ping():
    return {
        "success": True,
        "message": "Frontend-Backend connection test successful",
        "timestamp": _now_iso(),
    }


@router.get("/api/test/test-market")
async def market_check(scraper: NSEScraper = Depends(get_scraper)):
    """Market summary without authentication, wrapped for the connection test page."""
    try:
        summary = await get_market_summary(scraper)
    except HTTPException as e:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": e.detail, "timestamp": _now_iso()},
        )
    return {
        "success": True,
        "message": "Market data test successful",
        "data": summary,
        "timestamp": _now_iso(),
    }


@router.get("/test-api", include_in_schema=False)
async def diagnostic_page():
    return FileResponse(STATIC_DIR / "test-api.html", media_type="text/html")
