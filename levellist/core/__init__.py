"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    AUDIT_LIMIT,
    AUDIT_PAGE_SIZE,
    DATABASE_URL,
    DB_RESET,
    HEAD_ADMIN_NAME,
    HEAD_ADMIN_NATIONALITY,
    HEAD_ADMIN_PASSWORD,
    LOG_FORMAT,
    LOG_LEVEL,
)
from .database import engine, get_session
from .logging import setup_logging
from .time import DAY_MS, new_id, now_ms, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "AUDIT_LIMIT",
    "AUDIT_PAGE_SIZE",
    "DATABASE_URL",
    "DAY_MS",
    "DB_RESET",
    "HEAD_ADMIN_NAME",
    "HEAD_ADMIN_NATIONALITY",
    "HEAD_ADMIN_PASSWORD",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "engine",
    "get_session",
    "new_id",
    "now_ms",
    "setup_logging",
    "utcnow",
]
