"""Shared test fixtures."""

from __future__ import annotations

import itertools
from typing import Callable

import pytest

from levellist.models import Level, User
from levellist.services import LevelList, MemoryEntityStore
from levellist.services.moderation import Approval

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryEntityStore:
    return MemoryEntityStore()


@pytest.fixture
def ids() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


@pytest.fixture
def service(store, clock, ids) -> LevelList:
    return LevelList(store, clock=clock, id_factory=ids)


@pytest.fixture
def world(service) -> LevelList:
    """Head admin ``boss``, moderator ``mia`` and players alice, bob, carol."""

    service.users.seed_if_empty("boss", "secret1", "United Kingdom")
    for name in ("mia", "alice", "bob", "carol"):
        service.users.register(name, "secret1", "Germany")
    service.users.promote_to_mod("boss", "mia")
    return service


def publish(service: LevelList, name: str, moderator: str = "mia") -> Level:
    submission = service.submissions.submit_level(
        "boss",
        name,
        "Creator A, @alice",
        "1000",
        f"https://youtu.be/{name}",
        "https://raw.example/" + name,
        ["Cube Carried"],
    )
    return service.moderation.approve(submission.id, moderator).level


def complete(
    service: LevelList,
    username: str,
    level: Level,
    youtube: str = "",
    percent=100,
    moderator: str = "mia",
) -> Approval:
    submission = service.submissions.submit_completion(
        username,
        level.id,
        youtube or f"https://youtu.be/{username}-{level.id}",
        "https://raw.example/run",
        percent,
    )
    return service.moderation.approve(submission.id, moderator)


def set_points(service: LevelList, **points: int) -> None:
    users = service.runtime.load_users()
    for user in users:
        if user.username in points:
            user.points = points[user.username]
    service.runtime.save_users(users)


def user(service: LevelList, username: str) -> User:
    return service.users.get(username)
