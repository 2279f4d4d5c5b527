"""Points leaderboard, recomputed from the users snapshot on every call."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..models import User
from .context import Runtime


def standings(users: Iterable[User]) -> List[User]:
    """Users by points, highest first.

    ``sorted`` is stable, so users on equal points keep their store order;
    the account created earlier ranks higher.
    """

    return sorted(users, key=lambda user: -user.points)


def rank_index(users: Iterable[User]) -> Dict[str, int]:
    """Map of casefolded username to 1-based rank."""

    return {user.username.casefold(): pos for pos, user in enumerate(standings(users), start=1)}


def rank_of(users: Iterable[User], username: Optional[str]) -> Optional[int]:
    return rank_index(users).get((username or "").strip().casefold())


class Leaderboard:
    def __init__(self, runtime: Runtime) -> None:
        self.runtime = runtime

    def standings(self) -> List[User]:
        return standings(self.runtime.load_users())

    def rank(self, username: str) -> Optional[int]:
        """1-based rank of ``username``, or ``None`` if no such user."""

        return rank_of(self.runtime.load_users(), username)


__all__ = ["Leaderboard", "rank_index", "rank_of", "standings"]
