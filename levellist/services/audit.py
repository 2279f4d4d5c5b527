"""Bounded, newest-first audit trail of administrative actions.

Audit events are written after the action they describe has been saved.
The two saves are separate, so the action cannot be undone if the audit
write fails. A conflicting audit write is retried against a fresh copy of
the log (appending is safe to repeat); if it still cannot be written the
failure is logged at error level and the action's result is returned as
normal, leaving a gap in the trail rather than telling the caller to retry
an action that already happened.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from ..core.config import AUDIT_LIMIT
from ..models import AuditEvent
from .context import Runtime
from .errors import Conflict, StoreUnavailable

logger = structlog.get_logger()

WRITE_ATTEMPTS = 3


class AuditLog:
    """Append-only log capped at ``limit`` events; the oldest fall off first."""

    def __init__(self, runtime: Runtime, limit: int = AUDIT_LIMIT) -> None:
        self.runtime = runtime
        self.limit = limit

    def record(
        self,
        action: str,
        actor: Optional[str],
        target: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditEvent:
        event = AuditEvent(
            id=self.runtime.new_id(),
            action=action,
            actor=actor,
            target=target,
            details=details or {},
            ts=self.runtime.clock(),
        )
        for attempt in range(1, WRITE_ATTEMPTS + 1):
            try:
                events = self.runtime.load_audit()
                events.insert(0, event)
                del events[self.limit:]
                self.runtime.save_audit(events)
            except Conflict:
                logger.info("audit_write_retry", action=action, attempt=attempt)
                continue
            except StoreUnavailable as exc:
                logger.error(
                    "audit_write_failed",
                    action=action,
                    actor=actor,
                    target=target,
                    error=exc.message,
                )
                return event
            logger.info("audit_recorded", action=action, actor=actor, target=target)
            return event

        logger.error(
            "audit_write_failed",
            action=action,
            actor=actor,
            target=target,
            error="conflict",
            attempts=WRITE_ATTEMPTS,
        )
        return event

    def recent(self, limit: Optional[int] = None) -> List[AuditEvent]:
        events = self.runtime.load_audit()
        return events if limit is None else events[:limit]


__all__ = ["AuditLog", "WRITE_ATTEMPTS"]
