# backend/app/core/logger.py
import os
import sys

from loguru import logger

from backend.app.core.config import settings

LOG_DIR = os.path.join(os.getcwd(), settings.LOG_DIR)
os.makedirs(LOG_DIR, exist_ok=True)

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)
logger.add(
    os.path.join(LOG_DIR, "aiser.log"),
    rotation="10 MB",
    retention="14 days",
    level=settings.LOG_LEVEL,
    backtrace=True,
    diagnose=False,
)
