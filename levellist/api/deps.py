"""FastAPI dependencies."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException
from sqlmodel import Session

from ..core import get_session
from ..services import LevelList, SqlEntityStore

_INT_RE = re.compile(r"^-?\d+$")


def get_levellist(session: Session = Depends(get_session)) -> LevelList:
    """One service object per request, bound to the request's session."""

    return LevelList(SqlEntityStore(session))


def body_text(body: Dict[str, Any], key: str, *, required: bool = True) -> Optional[str]:
    value = body.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise HTTPException(400, f"'{key}' is required")
        return None
    if not isinstance(value, str):
        raise HTTPException(400, f"'{key}' must be a string")
    return value.strip()


def body_int(body: Dict[str, Any], key: str, default: Optional[int] = None) -> int:
    """Whole numbers only: JSON integers or strings of digits, never floats or booleans."""

    value = body.get(key, default)
    if value is None:
        raise HTTPException(400, f"'{key}' is required")
    if isinstance(value, bool):
        raise HTTPException(400, f"'{key}' must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value.strip()):
        return int(value.strip())
    raise HTTPException(400, f"'{key}' must be an integer")


__all__ = ["body_int", "body_text", "get_levellist"]
