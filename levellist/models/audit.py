"""Persisted schema for audit trail entries."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field

from .base import Record


class AuditEvent(Record):
    id: str
    action: str
    actor: Optional[str] = None
    target: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    ts: int


__all__ = ["AuditEvent"]
