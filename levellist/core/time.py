"""Clock and identifier helpers."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone

DAY_MS = 24 * 3600 * 1000


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    return uuid.uuid4().hex[:12]


__all__ = ["DAY_MS", "new_id", "now_ms", "utcnow"]
