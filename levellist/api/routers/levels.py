"""Ranked level list endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ...services import LevelList
from ...services.youtube import youtube_embed
from ..deps import body_text, get_levellist

router = APIRouter(tags=["levels"])


@router.get("/levels")
def list_levels(service: LevelList = Depends(get_levellist)):
    """Published levels ordered by placement."""

    return [
        {**level.to_doc(), "embed": youtube_embed(level.youtube)}
        for level in service.moderation.levels()
    ]


@router.delete("/levels/{level_id}")
def remove_level(level_id: str, moderator: str, service: LevelList = Depends(get_levellist)):
    """Remove a level and renumber the rest."""

    level = service.moderation.remove_level(level_id, moderator)
    return {"ok": True, "removed": level.id}


@router.post("/levels/{level_id}/move")
def move_level(
    level_id: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    """Swap a level with its neighbour above or below."""

    moved = service.moderation.swap_placement(
        level_id, body_text(body, "direction"), body_text(body, "moderator")
    )
    return {"moved": moved, "levels": [level.to_doc() for level in service.moderation.levels()]}


@router.put("/levels/{level_id}/tags")
def edit_tags(
    level_id: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    tags = body.get("tags")
    if not isinstance(tags, list):
        raise HTTPException(400, "'tags' must be a list")
    level = service.moderation.edit_tags(level_id, tags, body_text(body, "moderator"))
    return level.to_doc()


__all__ = ["router"]
