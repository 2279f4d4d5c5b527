"""Unit tests for the bounded audit log."""

from __future__ import annotations

from conftest import set_points, user

from levellist.services import Conflict, LevelList, MemoryEntityStore, StoreUnavailable
from levellist.services.audit import WRITE_ATTEMPTS
from levellist.services.store import AUDIT


class FailingAuditStore(MemoryEntityStore):
    """Fails the next ``failures`` audit saves with ``error``."""

    def __init__(self, error, failures):
        super().__init__()
        self.error = error
        self.failures = failures
        self.audit_attempts = 0

    def save(self, name, records):
        if name == AUDIT:
            self.audit_attempts += 1
            if self.failures:
                self.failures -= 1
                raise self.error("audit write refused")
        super().save(name, records)


def players(store, clock, ids):
    service = LevelList(store, clock=clock, id_factory=ids)
    service.users.seed_if_empty("boss", "secret1", "Malta")
    service.users.register("alice", "secret1", "Malta")
    return service


class TestAuditLog:
    """Newest-first, capped trail."""

    def test_newest_first(self, service, clock):
        """recent() starts with the latest event."""
        service.audit.record("first", "boss")
        clock.advance(5)
        service.audit.record("second", "boss", "alice", {"n": 2})
        events = service.audit.recent()
        assert [e.action for e in events] == ["second", "first"]
        assert events[0].target == "alice"
        assert events[0].details == {"n": 2}
        assert events[0].ts == events[1].ts + 5

    def test_capped_at_limit(self, service):
        """Only the most recent 300 events are retained."""
        for i in range(305):
            service.audit.record("tick", "boss", details={"i": i})
        events = service.audit.recent()
        assert len(events) == 300
        assert events[0].details == {"i": 304}
        assert events[-1].details == {"i": 5}

    def test_custom_limit(self, store, clock, ids):
        """The cap is configurable per service."""
        small = LevelList(store, clock=clock, id_factory=ids, audit_limit=3)
        for i in range(5):
            small.audit.record("tick", None, details={"i": i})
        assert [e.details["i"] for e in small.audit.recent()] == [4, 3, 2]

    def test_recent_limit(self, service):
        """recent(n) slices the head."""
        for action in ("a", "b", "c"):
            service.audit.record(action, "boss")
        assert [e.action for e in service.audit.recent(2)] == ["c", "b"]

    def test_stored_camel_case(self, service, store):
        """Persisted documents use the camelCase wire names."""
        service.audit.record("ban", "mia", "bob", {"until": 1})
        doc = store.load("audit")[0]
        assert set(doc) == {"id", "action", "actor", "target", "details", "ts"}


class TestAuditWriteFailures:
    """The action stands when only its audit write fails."""

    def test_conflict_is_retried(self, clock, ids):
        """A transient conflict is retried and the event is kept."""
        store = FailingAuditStore(Conflict, failures=1)
        service = players(store, clock, ids)
        service.audit.record("tick", "boss")
        assert [e.action for e in service.audit.recent()] == ["tick"]
        assert store.audit_attempts == 2

    def test_persistent_conflict_does_not_fail_equip(self, clock, ids):
        """Equip succeeds once; the caller is not told to retry a toggle."""
        store = FailingAuditStore(Conflict, failures=100)
        service = players(store, clock, ids)
        set_points(service, alice=150)

        equipped = service.titles.equip("alice", "maybe_him")

        assert equipped.equipped_title == "maybe_him"
        assert user(service, "alice").equipped_title == "maybe_him"
        assert service.audit.recent() == []
        assert store.audit_attempts == WRITE_ATTEMPTS

    def test_store_failure_does_not_fail_ban(self, clock, ids):
        """A database error on the audit write leaves the ban in place."""
        store = FailingAuditStore(StoreUnavailable, failures=1)
        service = players(store, clock, ids)

        service.bans.ban("boss", "alice", 0, "spam")

        assert service.bans.is_banned("alice")
        assert store.audit_attempts == 1
