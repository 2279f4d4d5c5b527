"""Persisted schema for ranked levels."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base import Record

LEVEL_TAGS = (
    "Cube Carried",
    "Ship Carried",
    "Wave Carried",
    "Ufo Carried",
    "Ball Carried",
    "Spider Carried",
    "Swing Carried",
    "Medium Length",
    "Long Length",
    "XL Length",
    "XXL Length (3+ Minutes)",
    "Slow Paced",
    "Fast Paced",
    "Memory Level",
    "Visibility Level",
)


class Level(Record):
    """Published level; placement is its 1-based position in the list."""

    id: str
    placement: int = Field(ge=1)
    name: str
    level_id: str = ""
    creators: List[str] = Field(default_factory=list)
    thumbnail: str = ""
    youtube: str = ""
    tags: List[str] = Field(default_factory=list)
    status: Literal["published"] = "published"
    submitter: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[int] = None


__all__ = ["LEVEL_TAGS", "Level"]
