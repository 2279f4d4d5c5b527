"""Entity store: named collections read and written whole.

Every logical operation is a load -> mutate -> save cycle on whole
collections. Stores track the version of each collection they loaded and
refuse to save over a newer version with :class:`Conflict`, so two actors
working from stale snapshots cannot silently overwrite each other. An
operation touching several collections still saves them one at a time;
there is no rollback across collections.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Dict, List, Optional, Protocol, Tuple

import structlog
from sqlalchemy import insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ..core.time import utcnow
from ..models import StoredCollection
from .errors import Conflict, StoreUnavailable

logger = structlog.get_logger()

USERS = "users"
LEVELS = "levels"
SUBMISSIONS = "submissions"
AUDIT = "audit"

COLLECTIONS = (USERS, LEVELS, SUBMISSIONS, AUDIT)

Doc = Dict[str, Any]


class EntityStore(Protocol):
    def load(self, name: str) -> List[Doc]:
        ...

    def save(self, name: str, records: List[Doc]) -> None:
        ...


class _VersionTracker:
    def __init__(self) -> None:
        self._seen: Dict[str, int] = {}

    def observe(self, name: str, version: int) -> None:
        self._seen[name] = version

    def expected(self, name: str) -> Optional[int]:
        return self._seen.get(name)

    def stale(self, name: str, expected: int, current: Optional[int] = None) -> Conflict:
        logger.warning(
            "stale_collection_write",
            collection=name,
            expected_version=expected,
            current_version=current,
        )
        return Conflict(f"Collection '{name}' changed since it was loaded; reload and retry")

    def check(self, name: str, current: int) -> None:
        expected = self._seen.get(name)
        if expected is not None and expected != current:
            raise self.stale(name, expected, current)


class MemoryEntityStore(_VersionTracker):
    """In-process store; records round-trip through JSON like a real backend.

    Forks share the data and one lock, so the version check and the write
    happen as a single step even across threads.
    """

    def __init__(
        self,
        _data: Optional[Dict[str, Tuple[int, str]]] = None,
        _lock: Optional[threading.Lock] = None,
    ) -> None:
        super().__init__()
        self._data: Dict[str, Tuple[int, str]] = _data if _data is not None else {}
        self._lock = _lock or threading.Lock()

    def fork(self) -> "MemoryEntityStore":
        """Another actor's view of the same data with its own version tracking."""

        return MemoryEntityStore(self._data, self._lock)

    def load(self, name: str) -> List[Doc]:
        with self._lock:
            version, payload = self._data.get(name, (0, "[]"))
        self.observe(name, version)
        return json.loads(payload)

    def save(self, name: str, records: List[Doc]) -> None:
        payload = json.dumps(records)
        with self._lock:
            current, _ = self._data.get(name, (0, "[]"))
            self.check(name, current)
            self._data[name] = (current + 1, payload)
        self.observe(name, current + 1)

    def version(self, name: str) -> int:
        return self._data.get(name, (0, "[]"))[0]


class SqlEntityStore(_VersionTracker):
    """Collections stored as JSON rows through a SQLModel session.

    Saves are compare-and-swap in the database: the first write of a
    collection is an INSERT guarded by the primary key, later writes are an
    UPDATE matching the version this store loaded. Losing either race is a
    :class:`Conflict`; database errors surface as
    :class:`StoreUnavailable`.
    """

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def _fetch(self, name: str) -> Optional[StoredCollection]:
        statement = (
            select(StoredCollection)
            .where(StoredCollection.name == name)
            .execution_options(populate_existing=True)
        )
        return self.session.exec(statement).first()

    def load(self, name: str) -> List[Doc]:
        row = self._fetch(name)
        if row is None:
            self.observe(name, 0)
            return []
        self.observe(name, row.version)
        return json.loads(row.payload_json or "[]")

    def save(self, name: str, records: List[Doc]) -> None:
        expected = self.expected(name)
        if expected is None:
            # Never loaded here: overwrite whatever version is current.
            row = self._fetch(name)
            expected = row.version if row else 0

        payload = json.dumps(records)
        now = utcnow()
        try:
            if expected == 0:
                self.session.execute(
                    insert(StoredCollection).values(
                        name=name, payload_json=payload, version=1, updated_at=now
                    )
                )
            else:
                result = self.session.execute(
                    update(StoredCollection)
                    .where(StoredCollection.name == name)
                    .where(StoredCollection.version == expected)
                    .values(payload_json=payload, version=expected + 1, updated_at=now)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    self.session.rollback()
                    raise self.stale(name, expected)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise self.stale(name, expected) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("collection_write_failed", collection=name, error=str(exc))
            raise StoreUnavailable(f"Could not save collection '{name}'") from exc
        self.observe(name, expected + 1)


__all__ = [
    "AUDIT",
    "COLLECTIONS",
    "EntityStore",
    "LEVELS",
    "MemoryEntityStore",
    "SUBMISSIONS",
    "SqlEntityStore",
    "USERS",
]
