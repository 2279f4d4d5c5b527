"""Submission state machine and ranked-list maintenance.

A submission starts ``pending`` and ends ``approved``, ``rejected`` or
``withdrawn``. Terminal submissions stay in the collection with who
resolved them and why, and only pending ones form the review queue.

Approving touches two collections (``levels`` or ``users``, then
``submissions``). They are saved one after the other without rollback; if
the second save fails the derived record exists while the submission is
still pending, and re-approving it is rejected by the duplicate guard
(completions) or creates a second level (levels). The audit event is
written after both; a failed audit write is logged, not raised (see
:mod:`levellist.services.audit`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

import structlog

from ..models import (
    LEVEL_TAGS,
    Completion,
    CompletionSubmission,
    Level,
    LevelSubmission,
    Submission,
    User,
)
from .audit import AuditLog
from .context import (
    Runtime,
    by_placement,
    find_level,
    find_user,
    get_user,
    require_staff,
)
from .errors import (
    InvalidTransition,
    NotFound,
    ReferenceMissing,
    SubmitterMissing,
    ValidationError,
)
from .titles import TitleEngine
from .youtube import youtube_thumb

logger = structlog.get_logger()

VALID_TRANSITIONS: Dict[str, Tuple[str, ...]] = {
    "pending": ("approved", "rejected", "withdrawn"),
    "approved": (),
    "rejected": (),
    "withdrawn": (),
}

_DIRECTIONS = {"up": -1, "down": 1, -1: -1, 1: 1}


def validate_transition(current: str, target: str) -> None:
    if target not in VALID_TRANSITIONS.get(current, ()):
        raise InvalidTransition(f"Invalid transition: {current} -> {target}")


def resolve(submission: Submission, status: str, actor: str, now: int, resolution: Optional[str] = None) -> None:
    validate_transition(submission.status, status)
    submission.status = status
    submission.resolved_by = actor
    submission.resolved_at = now
    submission.resolution = resolution


def points_for_placement(placement: int) -> int:
    """Placement 1 is worth 100 points, falling by one per place to a floor of 1."""

    return max(1, min(100, 101 - placement))


def validate_tags(tags: Iterable[str]) -> List[str]:
    picked = list(dict.fromkeys(tags))
    unknown = [tag for tag in picked if tag not in LEVEL_TAGS]
    if unknown:
        raise ValidationError(f"Unknown tags: {', '.join(unknown)}")
    return picked


def find_submission(submissions: Iterable[Submission], submission_id: str) -> Submission:
    for submission in submissions:
        if submission.id == submission_id:
            return submission
    raise NotFound(f"Submission '{submission_id}' not found")


@dataclass
class Approval:
    submission: Submission
    level: Optional[Level] = None
    completion: Optional[Completion] = None
    points_awarded: int = 0
    duplicate: bool = False


class ModerationService:
    def __init__(self, runtime: Runtime, titles: TitleEngine, audit: AuditLog) -> None:
        self.runtime = runtime
        self.titles = titles
        self.audit = audit

    # Queue -----------------------------------------------------------------

    def pending(self) -> List[Submission]:
        return [sub for sub in self.runtime.load_submissions() if sub.is_pending]

    def approve(self, submission_id: str, moderator: str) -> Approval:
        users = self.runtime.load_users()
        staff = require_staff(users, moderator)
        submissions = self.runtime.load_submissions()
        submission = find_submission(submissions, submission_id)
        validate_transition(submission.status, "approved")

        if isinstance(submission, LevelSubmission):
            return self._approve_level(submission, submissions, staff)
        return self._approve_completion(submission, submissions, users, staff)

    def _approve_level(
        self, submission: LevelSubmission, submissions: List[Submission], staff: User
    ) -> Approval:
        levels = self.runtime.load_levels()
        now = self.runtime.clock()
        level = Level(
            id=self.runtime.new_id(),
            placement=max((lv.placement for lv in levels), default=0) + 1,
            name=submission.name,
            level_id=submission.level_id,
            creators=list(submission.creators),
            thumbnail=submission.thumbnail or youtube_thumb(submission.youtube),
            youtube=submission.youtube,
            tags=list(submission.tags),
            submitter=submission.submitter,
            approved_by=staff.username,
            approved_at=now,
        )
        levels.append(level)
        self.runtime.save_levels(levels)

        resolve(submission, "approved", staff.username, now)
        self.runtime.save_submissions(submissions)

        logger.info("level_approved", submission_id=submission.id, level_id=level.id, placement=level.placement)
        self.audit.record(
            "approve_level",
            staff.username,
            level.id,
            {"name": level.name, "placement": level.placement},
        )
        return Approval(submission=submission, level=level)

    def _approve_completion(
        self,
        submission: CompletionSubmission,
        submissions: List[Submission],
        users: List[User],
        staff: User,
    ) -> Approval:
        now = self.runtime.clock()
        level = find_level(self.runtime.load_levels(), submission.level_ref)
        if level is None:
            self._discard(submission, submissions, staff, now, "level_missing")
            raise ReferenceMissing("Referenced level not found")

        user = find_user(users, submission.submitter)
        if user is None:
            self._discard(submission, submissions, staff, now, "submitter_missing")
            raise SubmitterMissing("Submitter account missing")

        points = points_for_placement(level.placement)
        duplicate = any(rec.same_evidence(level.id, submission.youtube) for rec in user.completed_records)
        completion = None
        if not duplicate:
            completion = Completion(
                level_id=level.id,
                level_name=submission.level_name or level.name,
                ts=now,
                percent=submission.percent,
                youtube=submission.youtube,
                awarded_points=points,
            )
            user.completed_records.append(completion)
            user.points += points
            self.titles.commit_users(users, actor=staff.username)

        resolve(submission, "approved", staff.username, now, "duplicate" if duplicate else None)
        self.runtime.save_submissions(submissions)

        awarded = 0 if duplicate else points
        logger.info(
            "completion_approved",
            submission_id=submission.id,
            submitter=user.username,
            points=awarded,
            duplicate=duplicate,
        )
        self.audit.record(
            "approve_completion",
            staff.username,
            submission.id,
            {
                "submitter": user.username,
                "level": level.id,
                "points": awarded,
                "percent": submission.percent,
                "duplicate": duplicate,
            },
        )
        return Approval(
            submission=submission,
            level=level,
            completion=completion,
            points_awarded=awarded,
            duplicate=duplicate,
        )

    def _discard(
        self,
        submission: Submission,
        submissions: List[Submission],
        staff: User,
        now: int,
        resolution: str,
    ) -> None:
        # A dangling reference cannot be retried, so the submission leaves the queue.
        resolve(submission, "rejected", staff.username, now, resolution)
        self.runtime.save_submissions(submissions)
        logger.warning("submission_discarded", submission_id=submission.id, resolution=resolution)

    def reject(self, submission_id: str, moderator: str, reason: Optional[str] = None) -> Submission:
        staff = require_staff(self.runtime.load_users(), moderator)
        submissions = self.runtime.load_submissions()
        submission = find_submission(submissions, submission_id)
        resolve(submission, "rejected", staff.username, self.runtime.clock(), reason)
        self.runtime.save_submissions(submissions)
        logger.info("submission_rejected", submission_id=submission.id, moderator=staff.username)
        self.audit.record(
            "reject_submission",
            staff.username,
            submission.id,
            {"type": submission.type, "submitter": submission.submitter, "reason": reason},
        )
        return submission

    # Ranked list -----------------------------------------------------------

    def levels(self) -> List[Level]:
        return by_placement(self.runtime.load_levels())

    def remove_level(self, level_id: str, moderator: str) -> Level:
        """Delete a level and close the gap so placements stay 1..N.

        Points already awarded for the level are left alone.
        """

        staff = require_staff(self.runtime.load_users(), moderator)
        levels = self.runtime.load_levels()
        level = find_level(levels, level_id)
        if level is None:
            raise NotFound(f"Level '{level_id}' not found")

        remaining = by_placement(lv for lv in levels if lv.id != level_id)
        for position, lv in enumerate(remaining, start=1):
            lv.placement = position
        self.runtime.save_levels(remaining)

        self.audit.record("remove_level", staff.username, level.id, {"name": level.name})
        return level

    def swap_placement(self, level_id: str, direction: Union[str, int], moderator: str) -> bool:
        """Swap with the neighbour above or below. Returns False at the edges."""

        step = _DIRECTIONS.get(direction)
        if step is None:
            raise ValidationError("Direction must be 'up' or 'down'")

        staff = require_staff(self.runtime.load_users(), moderator)
        levels = by_placement(self.runtime.load_levels())
        index = next((i for i, lv in enumerate(levels) if lv.id == level_id), None)
        if index is None:
            raise NotFound(f"Level '{level_id}' not found")

        target = index + step
        if target < 0 or target >= len(levels):
            return False

        moved, other = levels[index], levels[target]
        moved.placement, other.placement = other.placement, moved.placement
        self.runtime.save_levels(levels)

        self.audit.record(
            "move_level",
            staff.username,
            moved.id,
            {"name": moved.name, "placement": moved.placement, "swappedWith": other.id},
        )
        return True

    def edit_tags(self, level_id: str, tags: Iterable[str], moderator: str) -> Level:
        picked = validate_tags(tags)
        staff = require_staff(self.runtime.load_users(), moderator)
        levels = self.runtime.load_levels()
        level = find_level(levels, level_id)
        if level is None:
            raise NotFound(f"Level '{level_id}' not found")

        old = list(level.tags)
        level.tags = picked
        self.runtime.save_levels(levels)
        self.audit.record("edit_tags", staff.username, level.id, {"oldTags": old, "newTags": picked})
        return level

    # Completions -----------------------------------------------------------

    def delete_completion(self, moderator: str, username: str, level_id: str, youtube: str, ts: int) -> int:
        """Remove one completion and take back the points it was awarded.

        Uses the snapshotted ``awardedPoints`` because the level may have moved
        since. Returns the points removed; 0 if the record is already gone.
        """

        users = self.runtime.load_users()
        staff = require_staff(users, moderator)
        target = get_user(users, username)

        record = next(
            (
                rec
                for rec in target.completed_records
                if rec.same_evidence(level_id, youtube) and rec.ts == ts
            ),
            None,
        )
        if record is None:
            logger.info("completion_already_removed", username=target.username, level_id=level_id)
            return 0

        target.completed_records = [rec for rec in target.completed_records if rec is not record]
        target.points = max(0, target.points - record.awarded_points)
        self.titles.commit_users(users, actor=staff.username)

        self.audit.record(
            "delete_completion",
            staff.username,
            target.username,
            {
                "levelId": record.level_id,
                "levelName": record.level_name,
                "pointsRemoved": record.awarded_points,
            },
        )
        return record.awarded_points


__all__ = [
    "Approval",
    "ModerationService",
    "VALID_TRANSITIONS",
    "find_submission",
    "points_for_placement",
    "resolve",
    "validate_tags",
    "validate_transition",
]
