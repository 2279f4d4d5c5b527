"""Application settings and environment helpers."""

from __future__ import annotations

import os
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Storage ---------------------------------------------------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///data/app.db")
DB_RESET = _env_bool("DB_RESET", False)


# Seed account ----------------------------------------------------------------
HEAD_ADMIN_NAME = os.getenv("HEAD_ADMIN_NAME", "zmmieh.")
HEAD_ADMIN_PASSWORD = os.getenv("HEAD_ADMIN_PASSWORD", "123456")
HEAD_ADMIN_NATIONALITY = os.getenv("HEAD_ADMIN_NATIONALITY", "United Kingdom")


# Audit -----------------------------------------------------------------------
AUDIT_LIMIT = _env_int("AUDIT_LIMIT", 300)
AUDIT_PAGE_SIZE = _env_int("AUDIT_PAGE_SIZE", 100)


# CORS ------------------------------------------------------------------------
# FRONTEND_ORIGIN can contain a comma-separated list for multi-domain deploys.
_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)


# Logging ---------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "console")


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "AUDIT_LIMIT",
    "AUDIT_PAGE_SIZE",
    "DATABASE_URL",
    "DB_RESET",
    "HEAD_ADMIN_NAME",
    "HEAD_ADMIN_NATIONALITY",
    "HEAD_ADMIN_PASSWORD",
    "LOG_FORMAT",
    "LOG_LEVEL",
]
