"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import AUDIT_LIMIT
from ...models import LEVEL_TAGS
from ...services.titles import TITLES
from ..serializers import title_to_dict

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose the fixed catalogs the frontend renders."""

    return {
        "tags": list(LEVEL_TAGS),
        "titles": [title_to_dict(title) for title in TITLES],
        "audit_limit": AUDIT_LIMIT,
    }


__all__ = ["router"]
