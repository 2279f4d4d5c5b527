"""Persisted schema for accounts and their completion history."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base import Record

Role = Literal["user", "mod", "headadmin"]

STAFF_ROLES = frozenset({"mod", "headadmin"})

# bannedUntil value marking a ban that never expires.
PERMANENT_BAN_UNTIL = 9_999_999_999_999


class Completion(Record):
    """Approved completion snapshot embedded in a user."""

    level_id: str
    level_name: str = ""
    ts: int
    percent: Optional[int] = Field(default=None, ge=0, le=100)
    youtube: str = ""
    awarded_points: int = Field(ge=0)

    def same_evidence(self, level_id: str, youtube: str) -> bool:
        return self.level_id == level_id and self.youtube == youtube


class User(Record):
    """Participant account, points holder and title wearer."""

    id: str
    username: str
    password: str
    role: Role = "user"
    nationality: str = ""
    points: int = Field(default=0, ge=0)
    created_at: int = 0
    profile_pic: str = ""
    show_country: bool = True
    bio: str = ""
    completed_records: List[Completion] = Field(default_factory=list)
    equipped_title: str = "fresh"
    banned_until: Optional[int] = None
    ban_reason: Optional[str] = None
    banned_by: Optional[str] = None
    banned_at: Optional[int] = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def clear_ban(self) -> None:
        self.banned_until = None
        self.ban_reason = None
        self.banned_by = None
        self.banned_at = None


__all__ = ["Completion", "PERMANENT_BAN_UNTIL", "Role", "STAFF_ROLES", "User"]
