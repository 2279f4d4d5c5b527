"""Service object wiring every component to one store, clock and id source."""

from __future__ import annotations

from typing import Callable

from ..core.config import AUDIT_LIMIT
from ..core.time import new_id, now_ms
from .audit import AuditLog
from .bans import BanService
from .context import Runtime
from .leaderboard import Leaderboard
from .moderation import ModerationService
from .store import EntityStore
from .submissions import SubmissionService
from .titles import TitleEngine
from .users import UserService


class LevelList:
    """Entry point for all ranking, title, ban and moderation operations.

    Build one per store. The API builds one per request around a
    session-bound :class:`~levellist.services.store.SqlEntityStore`.
    """

    def __init__(
        self,
        store: EntityStore,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_id,
        audit_limit: int = AUDIT_LIMIT,
    ) -> None:
        self.runtime = Runtime(store=store, clock=clock, new_id=id_factory)
        self.audit = AuditLog(self.runtime, limit=audit_limit)
        self.leaderboard = Leaderboard(self.runtime)
        self.titles = TitleEngine(self.runtime, self.leaderboard, self.audit)
        self.bans = BanService(self.runtime, self.titles, self.audit)
        self.moderation = ModerationService(self.runtime, self.titles, self.audit)
        self.submissions = SubmissionService(self.runtime, self.bans, self.audit)
        self.users = UserService(self.runtime, self.titles, self.audit)


__all__ = ["LevelList"]
