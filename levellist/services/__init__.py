"""Service layer: the ranking rule engine and moderation workflow."""

from .engine import LevelList
from .errors import (
    Conflict,
    Forbidden,
    IneligibleTitle,
    InvalidTransition,
    LevelListError,
    NotFound,
    ReferenceMissing,
    StoreUnavailable,
    SubmitterMissing,
    ValidationError,
)
from .moderation import points_for_placement
from .store import EntityStore, MemoryEntityStore, SqlEntityStore
from .titles import FREE_TITLE, TITLES

__all__ = [
    "Conflict",
    "EntityStore",
    "FREE_TITLE",
    "Forbidden",
    "IneligibleTitle",
    "InvalidTransition",
    "LevelList",
    "LevelListError",
    "MemoryEntityStore",
    "NotFound",
    "ReferenceMissing",
    "SqlEntityStore",
    "StoreUnavailable",
    "SubmitterMissing",
    "TITLES",
    "ValidationError",
    "points_for_placement",
]
