"""Title catalog and eligibility rules.

Eligibility is never stored: it is evaluated against the live points and
the rank computed from the users snapshot at hand. The three "Top N"
titles require the exact rank, so a holder loses the title the moment
anyone overtakes them, without any change to their own record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

import structlog

from ..models import User
from .audit import AuditLog
from .context import Runtime, get_user
from .errors import IneligibleTitle
from .leaderboard import Leaderboard, rank_index

logger = structlog.get_logger()

FREE_TITLE = "fresh"


@dataclass(frozen=True)
class Title:
    id: str
    label: str
    requirement: str
    min_points: Optional[int] = None
    exact_rank: Optional[int] = None

    def allows(self, points: int, rank: Optional[int]) -> bool:
        if self.exact_rank is not None:
            return rank == self.exact_rank
        if self.min_points is not None:
            return points >= self.min_points
        return True


TITLES: Tuple[Title, ...] = (
    Title(FREE_TITLE, "Fresh", "Free, available to everyone"),
    Title("maybe_him", "Maybe him", "100 points", min_points=100),
    Title("let_me_cook", "Let me Cook...", "300 points", min_points=300),
    Title("just_better", "I'm just better", "500 points", min_points=500),
    Title("god_like", "God-Like", "1000 points", min_points=1000),
    Title("fart", "Fart", "3000 points", min_points=3000),
    Title("top3", "Top 3", "Only the user ranked #3", exact_rank=3),
    Title("top2", "Top 2", "Only the user ranked #2", exact_rank=2),
    Title("top1", "Yes I'm him, the Top 1", "Only the user ranked #1", exact_rank=1),
)

TITLES_BY_ID: Dict[str, Title] = {title.id: title for title in TITLES}


def title_allows(title_id: str, points: int, rank: Optional[int]) -> bool:
    """Unknown title ids are never eligible."""

    title = TITLES_BY_ID.get(title_id)
    return title is not None and title.allows(points, rank)


class TitleEngine:
    def __init__(self, runtime: Runtime, leaderboard: Leaderboard, audit: AuditLog) -> None:
        self.runtime = runtime
        self.leaderboard = leaderboard
        self.audit = audit

    def _rank(self, user: User, users: Optional[List[User]]) -> Optional[int]:
        if users is None:
            return self.leaderboard.rank(user.username)
        return rank_index(users).get(user.username.casefold())

    def is_eligible(self, user: User, title_id: str, users: Optional[List[User]] = None) -> bool:
        return title_allows(title_id, user.points, self._rank(user, users))

    def eligible_titles(self, user: User, users: Optional[List[User]] = None) -> List[Title]:
        rank = self._rank(user, users)
        return [title for title in TITLES if title.allows(user.points, rank)]

    def eligible_title_ids(self, user: User, users: Optional[List[User]] = None) -> FrozenSet[str]:
        return frozenset(title.id for title in self.eligible_titles(user, users))

    def display_title(self, user: User, users: Optional[List[User]] = None) -> Title:
        """Equipped title if it still qualifies, otherwise the free title."""

        if self.is_eligible(user, user.equipped_title, users):
            return TITLES_BY_ID[user.equipped_title]
        return TITLES_BY_ID[FREE_TITLE]

    def equip(self, username: str, title_id: str) -> User:
        """Equip ``title_id``; equipping the already-equipped title unequips it."""

        users = self.runtime.load_users()
        user = get_user(users, username)

        if not self.is_eligible(user, title_id, users):
            self.audit.record(
                "attempt_invalid_equip",
                user.username,
                user.username,
                {"attemptedTitle": title_id},
            )
            raise IneligibleTitle("You do not meet the requirements to equip this title")

        if user.equipped_title == title_id:
            user.equipped_title = FREE_TITLE
            self.commit_users(users, actor=user.username)
            self.audit.record("unequip_title", user.username, user.username, {"previous": title_id})
        else:
            user.equipped_title = title_id
            self.commit_users(users, actor=user.username)
            self.audit.record("equip_title", user.username, user.username, {"title": title_id})
        return user

    def commit_users(self, users: List[User], actor: Optional[str] = None) -> List[User]:
        """Save the users collection, first resetting titles that no longer qualify.

        Ranks are taken from the snapshot being saved, so a save that moves
        someone past a Top N holder strips that holder in the same write.
        Returns the users whose title was reset.
        """

        ranks = rank_index(users)
        reset: List[Tuple[User, str]] = []
        for user in users:
            if not title_allows(user.equipped_title, user.points, ranks.get(user.username.casefold())):
                reset.append((user, user.equipped_title))
                user.equipped_title = FREE_TITLE

        self.runtime.save_users(users)

        for user, attempted in reset:
            logger.info("equipped_title_reset", username=user.username, title=attempted)
            self.audit.record(
                "invalid_equipped_title_reset",
                actor or user.username,
                user.username,
                {"attempted": attempted},
            )
        return [user for user, _ in reset]


__all__ = [
    "FREE_TITLE",
    "TITLES",
    "TITLES_BY_ID",
    "Title",
    "TitleEngine",
    "title_allows",
]
