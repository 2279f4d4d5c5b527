"""Ban lifecycle with lazy expiry.

There is no background sweep. An expired ban is only noticed, and its
fields cleared, the next time someone asks whether the user is banned.
"""

from __future__ import annotations

from typing import List

import structlog

from ..core.time import DAY_MS
from ..models import PERMANENT_BAN_UNTIL, User
from .audit import AuditLog
from .context import Runtime, find_user, get_user, require_staff
from .errors import Forbidden, ValidationError
from .titles import TitleEngine

logger = structlog.get_logger()


def ban_active(user: User, now: int) -> bool:
    """Pure check; does not clear an expired ban."""

    if user.banned_until is None:
        return False
    return user.banned_until == PERMANENT_BAN_UNTIL or now < user.banned_until


class BanService:
    def __init__(self, runtime: Runtime, titles: TitleEngine, audit: AuditLog) -> None:
        self.runtime = runtime
        self.titles = titles
        self.audit = audit

    def is_banned(self, username: str) -> bool:
        users = self.runtime.load_users()
        user = find_user(users, username)
        if user is None or user.banned_until is None:
            return False
        if ban_active(user, self.runtime.clock()):
            return True

        logger.info("ban_expired", username=user.username, banned_until=user.banned_until)
        user.clear_ban()
        self.titles.commit_users(users)
        return False

    def ban(self, actor: str, username: str, duration_days: int, reason: str = "") -> User:
        """Ban ``username`` for ``duration_days``; zero means permanent."""

        if duration_days < 0:
            raise ValidationError("Ban duration cannot be negative")

        users = self.runtime.load_users()
        moderator = require_staff(users, actor)
        target = get_user(users, username)
        if target.role == "headadmin":
            raise Forbidden("You cannot ban the Head Admin")

        now = self.runtime.clock()
        if duration_days == 0:
            target.banned_until = PERMANENT_BAN_UNTIL
        else:
            target.banned_until = now + duration_days * DAY_MS
        target.ban_reason = reason or "No reason"
        target.banned_by = moderator.username
        target.banned_at = now
        self.titles.commit_users(users, actor=moderator.username)

        self.audit.record(
            "ban",
            moderator.username,
            target.username,
            {"until": target.banned_until, "reason": target.ban_reason},
        )
        return target

    def unban(self, actor: str, username: str) -> User:
        users = self.runtime.load_users()
        moderator = require_staff(users, actor)
        target = get_user(users, username)
        target.clear_ban()
        self.titles.commit_users(users, actor=moderator.username)
        self.audit.record("unban", moderator.username, target.username)
        return target

    def active_bans(self) -> List[User]:
        now = self.runtime.clock()
        return [user for user in self.runtime.load_users() if ban_active(user, now)]


__all__ = ["BanService", "ban_active"]
