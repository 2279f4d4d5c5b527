"""Ban management endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...models import PERMANENT_BAN_UNTIL
from ...services import LevelList
from ..deps import body_int, body_text, get_levellist

router = APIRouter(tags=["bans"])


def _ban_to_dict(user) -> Dict[str, Any]:
    return {
        "username": user.username,
        "bannedUntil": user.banned_until,
        "permanent": user.banned_until == PERMANENT_BAN_UNTIL,
        "reason": user.ban_reason,
        "bannedBy": user.banned_by,
        "bannedAt": user.banned_at,
    }


@router.get("/bans")
def list_bans(service: LevelList = Depends(get_levellist)):
    """Users whose ban is still in force."""

    return [_ban_to_dict(user) for user in service.bans.active_bans()]


@router.get("/bans/{username}")
def ban_status(username: str, service: LevelList = Depends(get_levellist)):
    """Whether the user is banned; clears the ban if it has expired."""

    return {"username": username, "banned": service.bans.is_banned(username)}


@router.post("/bans", status_code=201)
def ban_user(body: Dict[str, Any], service: LevelList = Depends(get_levellist)):
    """Ban a user for ``days`` days; 0 bans permanently."""

    user = service.bans.ban(
        body_text(body, "moderator"),
        body_text(body, "username"),
        body_int(body, "days", default=1),
        body_text(body, "reason", required=False) or "",
    )
    return _ban_to_dict(user)


@router.delete("/bans/{username}")
def unban_user(username: str, moderator: str, service: LevelList = Depends(get_levellist)):
    user = service.bans.unban(moderator, username)
    return {"ok": True, "username": user.username}


__all__ = ["router"]
