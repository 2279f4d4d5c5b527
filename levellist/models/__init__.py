"""Model exports."""

from .audit import AuditEvent
from .collection import StoredCollection
from .level import LEVEL_TAGS, Level
from .submission import (
    CompletionSubmission,
    LevelSubmission,
    Submission,
    submission_adapter,
)
from .user import PERMANENT_BAN_UNTIL, STAFF_ROLES, Completion, User

__all__ = [
    "AuditEvent",
    "Completion",
    "CompletionSubmission",
    "LEVEL_TAGS",
    "Level",
    "LevelSubmission",
    "PERMANENT_BAN_UNTIL",
    "STAFF_ROLES",
    "StoredCollection",
    "Submission",
    "User",
    "submission_adapter",
]
