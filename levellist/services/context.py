"""Runtime dependencies shared by the services, plus typed collection access."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from ..core.time import new_id, now_ms
from ..models import AuditEvent, Level, Submission, User, submission_adapter
from .errors import Forbidden, NotFound
from .store import AUDIT, LEVELS, SUBMISSIONS, USERS, EntityStore


@dataclass
class Runtime:
    """Injected store, clock and id generator. Nothing here caches state."""

    store: EntityStore
    clock: Callable[[], int] = field(default=now_ms)
    new_id: Callable[[], str] = field(default=new_id)

    def load_users(self) -> List[User]:
        return [User.model_validate(doc) for doc in self.store.load(USERS)]

    def save_users(self, users: Iterable[User]) -> None:
        self.store.save(USERS, [user.to_doc() for user in users])

    def load_levels(self) -> List[Level]:
        return [Level.model_validate(doc) for doc in self.store.load(LEVELS)]

    def save_levels(self, levels: Iterable[Level]) -> None:
        self.store.save(LEVELS, [level.to_doc() for level in levels])

    def load_submissions(self) -> List[Submission]:
        return [submission_adapter.validate_python(doc) for doc in self.store.load(SUBMISSIONS)]

    def save_submissions(self, submissions: Iterable[Submission]) -> None:
        self.store.save(SUBMISSIONS, [sub.to_doc() for sub in submissions])

    def load_audit(self) -> List[AuditEvent]:
        return [AuditEvent.model_validate(doc) for doc in self.store.load(AUDIT)]

    def save_audit(self, events: Iterable[AuditEvent]) -> None:
        self.store.save(AUDIT, [event.to_doc() for event in events])


def find_user(users: Iterable[User], username: Optional[str]) -> Optional[User]:
    """Usernames are unique case-insensitively."""

    wanted = (username or "").strip().casefold()
    if not wanted:
        return None
    for user in users:
        if user.username.casefold() == wanted:
            return user
    return None


def get_user(users: Iterable[User], username: Optional[str]) -> User:
    user = find_user(users, username)
    if user is None:
        raise NotFound(f"User '{username}' not found")
    return user


def require_staff(users: Iterable[User], actor: Optional[str]) -> User:
    user = find_user(users, actor)
    if user is None or not user.is_staff:
        raise Forbidden("Moderators only")
    return user


def find_level(levels: Iterable[Level], level_id: str) -> Optional[Level]:
    for level in levels:
        if level.id == level_id:
            return level
    return None


def by_placement(levels: Iterable[Level]) -> List[Level]:
    return sorted(levels, key=lambda level: level.placement)


__all__ = [
    "Runtime",
    "by_placement",
    "find_level",
    "find_user",
    "get_user",
    "require_staff",
]
