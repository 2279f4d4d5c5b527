"""Unit tests for the ban lifecycle."""

from __future__ import annotations

import pytest
from conftest import user

from levellist.core.time import DAY_MS
from levellist.models import PERMANENT_BAN_UNTIL
from levellist.services import Forbidden, NotFound, ValidationError


class TestBan:
    """Issuing and lifting bans."""

    def test_permanent_ban(self, world, clock):
        """Zero days never expires."""
        world.bans.ban("mia", "alice", 0, "cheating")
        assert user(world, "alice").banned_until == PERMANENT_BAN_UNTIL
        clock.advance(3650 * DAY_MS)
        assert world.bans.is_banned("alice")

    def test_timed_ban_expires_lazily(self, world, clock):
        """A one-day ban clears itself on the first check after expiry."""
        world.bans.ban("mia", "alice", 1, "spam")
        assert world.bans.is_banned("alice")

        clock.advance(DAY_MS)
        stored = user(world, "alice")
        assert stored.banned_until is not None

        clock.advance(1)
        assert not world.bans.is_banned("alice")
        cleared = user(world, "alice")
        assert cleared.banned_until is None
        assert cleared.ban_reason is None
        assert cleared.banned_by is None
        assert cleared.banned_at is None

    def test_ban_fields_recorded(self, world, clock):
        """Reason, moderator and timestamp are stored."""
        world.bans.ban("mia", "bob", 2, "toxicity")
        bob = user(world, "bob")
        assert bob.banned_until == clock.now + 2 * DAY_MS
        assert bob.ban_reason == "toxicity"
        assert bob.banned_by == "mia"
        assert bob.banned_at == clock.now
        event = world.audit.recent(1)[0]
        assert event.action == "ban"
        assert event.target == "bob"
        assert event.details == {"until": bob.banned_until, "reason": "toxicity"}

    def test_head_admin_cannot_be_banned(self, world):
        """The head admin role is protected."""
        with pytest.raises(Forbidden):
            world.bans.ban("mia", "boss", 1, "coup")

    def test_players_cannot_ban(self, world):
        """Only staff may ban."""
        with pytest.raises(Forbidden):
            world.bans.ban("alice", "bob", 1, "")

    def test_unknown_target(self, world):
        """Banning a missing user is NotFound."""
        with pytest.raises(NotFound):
            world.bans.ban("mia", "ghost", 1, "")

    def test_negative_duration(self, world):
        """Durations below zero are rejected."""
        with pytest.raises(ValidationError):
            world.bans.ban("mia", "bob", -1, "")

    def test_unban(self, world):
        """Unban clears the fields and is audited."""
        world.bans.ban("mia", "bob", 0, "")
        world.bans.unban("boss", "bob")
        assert not world.bans.is_banned("bob")
        assert world.audit.recent(1)[0].action == "unban"

    def test_no_ban_and_unknown_user(self, world):
        """Unbanned and missing users are not banned."""
        assert not world.bans.is_banned("carol")
        assert not world.bans.is_banned("ghost")

    def test_active_bans(self, world, clock):
        """Listing excludes expired bans without clearing them."""
        world.bans.ban("mia", "alice", 1, "")
        world.bans.ban("mia", "bob", 0, "")
        clock.advance(DAY_MS + 1)
        assert [u.username for u in world.bans.active_bans()] == ["bob"]
        assert user(world, "alice").banned_until is not None
