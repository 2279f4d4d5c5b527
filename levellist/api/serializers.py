"""Response shaping for API endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import User
from ..services.titles import Title
from ..services.users import Profile


def title_to_dict(title: Title) -> Dict[str, Any]:
    return {"id": title.id, "label": title.label, "requirement": title.requirement}


def user_to_public_dict(user: User, rank: Optional[int] = None, title: Optional[Title] = None) -> Dict[str, Any]:
    """Public view of an account; never includes the password."""

    data = user.to_doc()
    data.pop("password", None)
    data.pop("completedRecords", None)
    if not user.show_country:
        data["nationality"] = None
    data["rank"] = rank
    if title is not None:
        data["title"] = title_to_dict(title)
    return data


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {
        "user": user_to_public_dict(profile.user, profile.rank, profile.title),
        "eligibleTitles": [title_to_dict(title) for title in profile.eligible_titles],
        "completions": [rec.to_doc() for rec in profile.completions],
    }


__all__ = ["profile_to_dict", "title_to_dict", "user_to_public_dict"]
