"""Unit tests for submission intake."""

from __future__ import annotations

import pytest
from conftest import publish

from levellist.services import Forbidden, InvalidTransition, NotFound, ValidationError
from levellist.services.submissions import clamp_percent, split_creators


def submit(world, submitter="alice", **overrides):
    fields = dict(
        name="Bloodbath",
        creators="Riot, Knobbelboy",
        level_id="10565740",
        youtube="https://youtu.be/bb",
        raw="https://raw.example/bb",
        tags=["Long Length"],
    )
    fields.update(overrides)
    return world.submissions.submit_level(submitter, **fields)


class TestHelpers:
    """Field normalisation helpers."""

    def test_split_creators(self):
        """Comma lists are split and trimmed."""
        assert split_creators(" a, b ,,c ") == ["a", "b", "c"]
        assert split_creators(["x", " ", "y "]) == ["x", "y"]
        assert split_creators(None) == []

    @pytest.mark.parametrize("raw,expected", [(None, None), ("", None), (150, 100), (-3, 0), ("99.6", 100), (42, 42)])
    def test_clamp_percent(self, raw, expected):
        """Percent is clamped to 0..100."""
        assert clamp_percent(raw) == expected

    def test_clamp_percent_rejects_text(self):
        """Non-numeric percent is a validation error."""
        with pytest.raises(ValidationError):
            clamp_percent("most")


class TestSubmitLevel:
    """Level submissions."""

    def test_pending_after_submit(self, world):
        """A new submission joins the queue."""
        sub = submit(world)
        assert sub.type == "level"
        assert sub.status == "pending"
        assert sub.creators == ["Riot", "Knobbelboy"]
        assert [s.id for s in world.moderation.pending()] == [sub.id]

    @pytest.mark.parametrize("field", ["name", "level_id", "youtube", "raw"])
    def test_required_fields(self, world, field):
        """Blank required fields are rejected."""
        with pytest.raises(ValidationError):
            submit(world, **{field: "  "})

    def test_requires_creator(self, world):
        """At least one creator."""
        with pytest.raises(ValidationError):
            submit(world, creators=" , ")

    def test_requires_tag(self, world):
        """At least one known tag."""
        with pytest.raises(ValidationError):
            submit(world, tags=[])
        with pytest.raises(ValidationError):
            submit(world, tags=["Extreme Demon"])

    def test_unknown_submitter(self, world):
        """Only registered users can submit."""
        with pytest.raises(NotFound):
            submit(world, submitter="ghost")

    def test_banned_submitter(self, world):
        """Banned users are refused."""
        world.bans.ban("mia", "alice", 0, "spam")
        with pytest.raises(Forbidden):
            submit(world)

    def test_submitter_name_canonical(self, world):
        """Submitter is stored with the account's spelling."""
        assert submit(world, submitter="ALICE").submitter == "alice"


class TestSubmitCompletion:
    """Completion submissions."""

    def test_references_level(self, world):
        """Level name is captured at submission time."""
        level = publish(world, "Sonic Wave")
        sub = world.submissions.submit_completion("bob", level.id, "https://youtu.be/sw", "raw", "77")
        assert sub.type == "completion"
        assert sub.level_ref == level.id
        assert sub.level_name == "Sonic Wave"
        assert sub.percent == 77

    def test_unknown_level(self, world):
        """Completions need an existing level."""
        with pytest.raises(ValidationError, match="Unknown level"):
            world.submissions.submit_completion("bob", "missing", "https://youtu.be/x", "raw")


class TestWithdraw:
    """Submitters retract their own pending work."""

    def test_withdraw(self, world):
        """Withdrawn submissions leave the queue and keep history."""
        sub = submit(world)
        withdrawn = world.submissions.withdraw(sub.id, "alice")
        assert withdrawn.status == "withdrawn"
        assert withdrawn.resolved_by == "alice"
        assert world.moderation.pending() == []
        assert [s.id for s in world.submissions.for_submitter("Alice")] == [sub.id]

    def test_only_own(self, world):
        """Other users cannot withdraw."""
        sub = submit(world)
        with pytest.raises(Forbidden):
            world.submissions.withdraw(sub.id, "bob")

    def test_not_after_resolution(self, world):
        """Approved submissions cannot be withdrawn."""
        sub = submit(world)
        world.moderation.approve(sub.id, "mia")
        with pytest.raises(InvalidTransition):
            world.submissions.withdraw(sub.id, "alice")
