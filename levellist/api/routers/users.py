"""User profile, title and maintenance endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from ...services import LevelList
from ...services.users import SEARCH_LIMIT
from ..deps import body_text, get_levellist
from ..serializers import profile_to_dict, title_to_dict, user_to_public_dict

router = APIRouter(tags=["users"])


@router.post("/users", status_code=201)
def register_user(body: Dict[str, Any], service: LevelList = Depends(get_levellist)):
    """Create an account."""

    user = service.users.register(
        body_text(body, "username"),
        body.get("password") or "",
        body_text(body, "nationality"),
    )
    return user_to_public_dict(user, rank=service.leaderboard.rank(user.username))


@router.get("/users")
def search_users(
    moderator: str,
    q: str = "",
    limit: int = Query(SEARCH_LIMIT, ge=1, le=SEARCH_LIMIT),
    service: LevelList = Depends(get_levellist),
):
    """Moderator player search by partial username."""

    return [
        {"username": user.username, "points": user.points, "role": user.role}
        for user in service.users.search(moderator, q, limit)
    ]


@router.get("/users/{username}")
def get_user_profile(username: str, service: LevelList = Depends(get_levellist)):
    """Public profile with rank, displayed title and completions."""

    return profile_to_dict(service.users.profile(username))


@router.patch("/users/{username}/profile")
def update_profile(
    username: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    """Edit bio and country visibility."""

    bio = body.get("bio")
    if bio is not None and not isinstance(bio, str):
        raise HTTPException(400, "'bio' must be a string")
    show_country = body.get("show_country")
    if show_country is not None and not isinstance(show_country, bool):
        raise HTTPException(400, "'show_country' must be a boolean")

    service.users.update_profile(username, bio=bio, show_country=show_country)
    return profile_to_dict(service.users.profile(username))


@router.post("/users/{username}/password")
def change_password(
    username: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    user = service.users.change_password(
        username,
        body.get("current") or "",
        body.get("new") or "",
        body.get("confirm"),
    )
    return {"ok": True, "username": user.username}


@router.get("/users/{username}/titles")
def list_titles(username: str, service: LevelList = Depends(get_levellist)):
    """Titles the user may equip right now."""

    profile = service.users.profile(username)
    return {
        "equipped": profile.user.equipped_title,
        "displayed": title_to_dict(profile.title),
        "eligible": [title_to_dict(title) for title in profile.eligible_titles],
    }


@router.post("/users/{username}/title")
def equip_title(
    username: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    """Equip a title, or unequip it if it is already equipped."""

    user = service.titles.equip(username, body_text(body, "title_id"))
    return {"username": user.username, "equippedTitle": user.equipped_title}


@router.post("/users/{username}/promote")
def promote_user(
    username: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    """Head admin promotes a player to moderator."""

    user = service.users.promote_to_mod(body_text(body, "actor"), username)
    return {"username": user.username, "role": user.role}


@router.get("/users/{username}/submissions")
def list_user_submissions(username: str, service: LevelList = Depends(get_levellist)):
    """Every submission the user has made, in any state."""

    return [sub.to_doc() for sub in service.submissions.for_submitter(username)]


@router.delete("/users/{username}/completions")
def delete_completion(
    username: str,
    moderator: str,
    level_id: str,
    youtube: str,
    ts: int,
    service: LevelList = Depends(get_levellist),
):
    """Remove a completion and subtract the points it awarded."""

    removed = service.moderation.delete_completion(moderator, username, level_id, youtube, ts)
    user = service.users.get(username)
    return {"ok": True, "pointsRemoved": removed, "points": user.points}


__all__ = ["router"]
