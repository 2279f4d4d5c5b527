"""Persisted schema for user submissions awaiting moderation."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .base import Record

SubmissionStatus = Literal["pending", "approved", "rejected", "withdrawn"]


class SubmissionBase(Record):
    id: str
    submitter: str
    status: SubmissionStatus = "pending"
    created_at: int
    resolved_by: Optional[str] = None
    resolved_at: Optional[int] = None
    resolution: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


class LevelSubmission(SubmissionBase):
    """Proposed new level."""

    type: Literal["level"] = "level"
    name: str
    creators: List[str] = Field(default_factory=list)
    level_id: str
    youtube: str
    raw: str
    tags: List[str] = Field(default_factory=list)
    thumbnail: str = ""


class CompletionSubmission(SubmissionBase):
    """Claimed completion of a published level."""

    type: Literal["completion"] = "completion"
    level_ref: str
    level_name: str = ""
    youtube: str
    raw: str
    percent: Optional[int] = Field(default=None, ge=0, le=100)


Submission = Annotated[
    Union[LevelSubmission, CompletionSubmission], Field(discriminator="type")
]

submission_adapter: TypeAdapter[Submission] = TypeAdapter(Submission)


__all__ = [
    "CompletionSubmission",
    "LevelSubmission",
    "Submission",
    "SubmissionBase",
    "SubmissionStatus",
    "submission_adapter",
]
