"""Leaderboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...services import LevelList
from ...services.leaderboard import standings
from ..deps import get_levellist
from ..serializers import title_to_dict

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
def get_leaderboard(service: LevelList = Depends(get_levellist)):
    """Users ranked by points with the title each currently displays."""

    users = service.runtime.load_users()
    return {
        "entries": [
            {
                "rank": rank,
                "username": user.username,
                "points": user.points,
                "role": user.role,
                "nationality": user.nationality if user.show_country else None,
                "createdAt": user.created_at,
                "title": title_to_dict(service.titles.display_title(user, users)),
            }
            for rank, user in enumerate(standings(users), start=1)
        ]
    }


@router.get("/leaderboard/{username}")
def get_rank(username: str, service: LevelList = Depends(get_levellist)):
    """Current rank of a single user."""

    user = service.users.get(username)
    return {
        "username": user.username,
        "points": user.points,
        "rank": service.leaderboard.rank(user.username),
    }


__all__ = ["router"]
