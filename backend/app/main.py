"""
FastAPI application entrypoint for the Aiser backend.
- Creates database tables on startup and disposes the engine on shutdown.
- Registers the API routers and configures CORS, security headers and rate limiting.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.core.config import AppConfig, settings
from backend.app.core.logger import logger
from backend.app.core.rate_limit import build_limiter, enforce_rate_limit, parse_rate_limit
from backend.app.db.session import close_db, init_db

from backend.app.api.v1 import ai as ai_router
from backend.app.api.v1 import auth as auth_router
from backend.app.api.v1 import market as market_router
from backend.app.api.v1 import portfolio as portfolio_router
from backend.app.api.v1 import system as system_router
from backend.app.api.v1 import users as users_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Aiser starting up - initializing DB")
    try:
        await init_db()
        logger.info("✅ Database initialized successfully")
    except Exception as e:
        logger.exception(f"DB init failed: {e}")
        raise

    yield

    logger.info("Aiser shutting down gracefully")
    await close_db()
    logger.info("✅ Database connections closed")


def cors_origins(config: AppConfig) -> list[str]:
    if config.is_production:
        return [config.FRONTEND_URL]
    # Development: allow any origin so local frontends and the diagnostic page work
    return ["*"]


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or settings

    app = FastAPI(
        title=config.PROJECT_NAME,
        version=config.VERSION,
        description="AI-Powered Investment Advisory API",
        docs_url="/api/docs" if not config.is_production else None,
        redoc_url="/api/redoc" if not config.is_production else None,
        lifespan=lifespan,
        dependencies=[Depends(enforce_rate_limit)],
    )
    app.state.config = config

    origins = cors_origins(config)
    logger.info(f"CORS enabled for origins: {origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
        max_age=3600,
    )

    app.state.limiter = build_limiter(config)
    app.state.rate_limit = parse_rate_limit(config)

    @app.middleware("http")
    async def add_security_headers(request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    app.include_router(system_router.router)
    app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(users_router.router, prefix="/api/users", tags=["Users"])
    app.include_router(portfolio_router.router, prefix="/api/portfolio", tags=["Portfolio"])
    app.include_router(market_router.router, prefix="/api/market", tags=["Market"])
    app.include_router(ai_router.router, prefix="/api/ai", tags=["AI"])

    @app.get("/", tags=["Root"])
    async def root() -> dict:
        return {
            "service": f"{config.PROJECT_NAME} API",
            "version": config.VERSION,
            "status": "operational",
            "environment": config.ENV,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting Aiser API on {settings.HOST}:{settings.PORT}")

    uvicorn.run(
        "backend.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not settings.is_production,
        log_level="info" if settings.is_production else "debug",
        access_log=True,
    )
