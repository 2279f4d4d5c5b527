"""Intake of level and completion submissions from players."""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

import structlog

from ..models import CompletionSubmission, LevelSubmission, Submission
from .audit import AuditLog
from .bans import BanService
from .context import Runtime, find_level, get_user
from .errors import Forbidden, ValidationError
from .moderation import find_submission, resolve, validate_tags

logger = structlog.get_logger()


def _required(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationError("Please fill required fields: " + ", ".join(missing))


def split_creators(creators: Union[str, Iterable[str], None]) -> List[str]:
    if creators is None:
        return []
    parts = creators.split(",") if isinstance(creators, str) else creators
    return [part.strip() for part in parts if part and part.strip()]


def clamp_percent(percent: Union[int, float, str, None]) -> Optional[int]:
    if percent is None or percent == "":
        return None
    try:
        value = float(percent)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Percent must be a number") from exc
    return max(0, min(100, int(round(value))))


class SubmissionService:
    def __init__(self, runtime: Runtime, bans: BanService, audit: AuditLog) -> None:
        self.runtime = runtime
        self.bans = bans
        self.audit = audit

    def _submitter(self, username: str) -> str:
        if self.bans.is_banned(username):
            raise Forbidden("Banned users cannot submit")
        return get_user(self.runtime.load_users(), username).username

    def submit_level(
        self,
        submitter: str,
        name: str,
        creators: Union[str, Iterable[str], None],
        level_id: str,
        youtube: str,
        raw: str,
        tags: Iterable[str],
        thumbnail: str = "",
    ) -> LevelSubmission:
        creator_list = split_creators(creators)
        _required(name=name, level_id=level_id, youtube=youtube, raw=raw)
        if not creator_list:
            raise ValidationError("Please fill required fields: creators")
        picked = validate_tags(tags or [])
        if not picked:
            raise ValidationError("Please select at least one tag")

        username = self._submitter(submitter)
        submission = LevelSubmission(
            id=self.runtime.new_id(),
            submitter=username,
            created_at=self.runtime.clock(),
            name=name.strip(),
            creators=creator_list,
            level_id=level_id.strip(),
            youtube=youtube.strip(),
            raw=raw.strip(),
            tags=picked,
            thumbnail=(thumbnail or "").strip(),
        )
        submissions = self.runtime.load_submissions()
        submissions.append(submission)
        self.runtime.save_submissions(submissions)

        self.audit.record("submit_level", username, None, {"name": submission.name})
        return submission

    def submit_completion(
        self,
        submitter: str,
        level_ref: str,
        youtube: str,
        raw: str,
        percent: Union[int, float, str, None] = None,
    ) -> CompletionSubmission:
        _required(level_ref=level_ref, youtube=youtube, raw=raw)
        clamped = clamp_percent(percent)
        level = find_level(self.runtime.load_levels(), level_ref)
        if level is None:
            raise ValidationError("Unknown level")

        username = self._submitter(submitter)
        submission = CompletionSubmission(
            id=self.runtime.new_id(),
            submitter=username,
            created_at=self.runtime.clock(),
            level_ref=level.id,
            level_name=level.name,
            youtube=youtube.strip(),
            raw=raw.strip(),
            percent=clamped,
        )
        submissions = self.runtime.load_submissions()
        submissions.append(submission)
        self.runtime.save_submissions(submissions)

        self.audit.record(
            "submit_completion",
            username,
            None,
            {"levelRef": level.id, "percent": clamped},
        )
        return submission

    def withdraw(self, submission_id: str, actor: str) -> Submission:
        """Submitters can retract their own pending submissions."""

        submissions = self.runtime.load_submissions()
        submission = find_submission(submissions, submission_id)
        if submission.submitter.casefold() != (actor or "").strip().casefold():
            raise Forbidden("You can only withdraw your own submissions")
        resolve(submission, "withdrawn", submission.submitter, self.runtime.clock())
        self.runtime.save_submissions(submissions)
        logger.info("submission_withdrawn", submission_id=submission.id)
        return submission

    def for_submitter(self, username: str) -> List[Submission]:
        wanted = (username or "").strip().casefold()
        return [sub for sub in self.runtime.load_submissions() if sub.submitter.casefold() == wanted]

    def get(self, submission_id: str) -> Submission:
        return find_submission(self.runtime.load_submissions(), submission_id)


__all__ = ["SubmissionService", "clamp_percent", "split_creators"]
