"""Helpers for YouTube evidence links."""

from __future__ import annotations

import re
from typing import Optional

_QUERY_ID = re.compile(r"[?&]v=([^&]+)")
_SHORT_ID = re.compile(r"youtu\.be/([^?&]+)")
_EMBED_ID = re.compile(r"youtube\.com/embed/([^?&/]+)")


def youtube_id(url: Optional[str]) -> Optional[str]:
    """Extract the video id from watch, short, or embed links.

    Falls back to the last path segment for anything else.
    """

    if not url:
        return None
    for pattern in (_QUERY_ID, _SHORT_ID, _EMBED_ID):
        match = pattern.search(url)
        if match:
            return match.group(1)
    return url.rstrip("/").split("/")[-1] or None


def youtube_thumb(url: Optional[str]) -> str:
    video_id = youtube_id(url)
    return f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg" if video_id else ""


def youtube_embed(url: Optional[str]) -> Optional[str]:
    video_id = youtube_id(url)
    return f"https://www.youtube.com/embed/{video_id}" if video_id else None


__all__ = ["youtube_embed", "youtube_id", "youtube_thumb"]
