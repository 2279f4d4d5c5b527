"""Audit log endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...core import AUDIT_PAGE_SIZE
from ...services import LevelList
from ..deps import get_levellist

router = APIRouter(tags=["audit"])


@router.get("/audit")
def list_audit(
    limit: int = Query(AUDIT_PAGE_SIZE, ge=1),
    service: LevelList = Depends(get_levellist),
):
    """Most recent audit events, newest first."""

    return [event.to_doc() for event in service.audit.recent(limit)]


__all__ = ["router"]
