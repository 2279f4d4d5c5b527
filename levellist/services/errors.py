"""Domain errors raised by the ranking and moderation services."""

from __future__ import annotations


class LevelListError(Exception):
    """Base class; ``status_code`` is what the HTTP layer answers with."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(LevelListError):
    status_code = 404
    kind = "not_found"


class ReferenceMissing(LevelListError):
    """Completion points at a level that no longer exists."""

    status_code = 409
    kind = "reference_missing"


class SubmitterMissing(LevelListError):
    """Submitting account was deleted before approval."""

    status_code = 409
    kind = "submitter_missing"


class IneligibleTitle(LevelListError):
    status_code = 403
    kind = "ineligible_title"


class Forbidden(LevelListError):
    status_code = 403
    kind = "forbidden"


class ValidationError(LevelListError):
    status_code = 400
    kind = "validation_error"


class Conflict(LevelListError):
    """Collection changed underneath a writer holding a stale snapshot."""

    status_code = 409
    kind = "conflict"


class InvalidTransition(LevelListError):
    status_code = 409
    kind = "invalid_transition"


class StoreUnavailable(LevelListError):
    """The backing database refused or failed a write."""

    status_code = 503
    kind = "store_unavailable"


__all__ = [
    "Conflict",
    "Forbidden",
    "IneligibleTitle",
    "InvalidTransition",
    "LevelListError",
    "NotFound",
    "ReferenceMissing",
    "StoreUnavailable",
    "SubmitterMissing",
    "ValidationError",
]
