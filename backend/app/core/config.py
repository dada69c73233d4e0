"""
Application configuration using Pydantic BaseSettings.
Centralized settings loader for the Aiser backend.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class AppConfig(BaseSettings):
    # Environment
    ENV: str = "development"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Core app info
    PROJECT_NAME: str = "Aiser"
    VERSION: str = "1.0.0"

    # Auth tokens
    SECRET_KEY: str = "CHANGE_THIS_IN_PRODUCTION"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Database - SQLite for development, PostgreSQL for production
    DATABASE_URL: str = "sqlite+aiosqlite:///./aiser.db"

    # NSE market data providers
    NSE_SCRAPER_URL: str = "https://afx.kwayisi.org/nse/"
    NSE_API_URL: str = "https://nairobi-stock-exchange.p.rapidapi.com"
    NSE_API_HOST: str = "nairobi-stock-exchange.p.rapidapi.com"
    RAPIDAPI_KEY: Optional[str] = None

    # Frontend origin allowed for CORS in production
    FRONTEND_URL: str = "http://localhost:5173"

    # Rate limiting (defaults: 100 requests per 15 minutes per client)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 900
    RATE_LIMIT_MAX_REQUESTS: int = 100

    # Logging
    LOG_DIR: str = "backend/logs"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # prevents crash if .env has extra keys

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def rate_limit(self) -> str:
        return f"{self.RATE_LIMIT_MAX_REQUESTS} per {self.RATE_LIMIT_WINDOW_SECONDS} seconds"


@lru_cache()
def get_settings() -> AppConfig:
    return AppConfig()


settings: AppConfig = get_settings()
