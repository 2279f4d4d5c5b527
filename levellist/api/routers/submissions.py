"""Submission intake and moderation endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ...services import LevelList
from ..deps import body_text, get_levellist

router = APIRouter(tags=["submissions"])

_STATUSES = {"pending", "approved", "rejected", "withdrawn", "all"}


@router.get("/submissions")
def list_submissions(status: str = "pending", service: LevelList = Depends(get_levellist)):
    """Review queue; pass ``status=all`` for the full history."""

    if status not in _STATUSES:
        raise HTTPException(400, f"Unknown status '{status}'")
    submissions = service.runtime.load_submissions()
    if status != "all":
        submissions = [sub for sub in submissions if sub.status == status]
    return [sub.to_doc() for sub in submissions]


@router.get("/submissions/{submission_id}")
def get_submission(submission_id: str, service: LevelList = Depends(get_levellist)):
    return service.submissions.get(submission_id).to_doc()


@router.post("/submissions/level", status_code=201)
def submit_level(body: Dict[str, Any], service: LevelList = Depends(get_levellist)):
    """Propose a new level for the list."""

    tags = body.get("tags") or []
    if not isinstance(tags, list):
        raise HTTPException(400, "'tags' must be a list")

    submission = service.submissions.submit_level(
        submitter=body_text(body, "submitter"),
        name=body.get("name") or "",
        creators=body.get("creators"),
        level_id=str(body.get("level_id") or ""),
        youtube=body.get("youtube") or "",
        raw=body.get("raw") or "",
        tags=tags,
        thumbnail=body.get("thumbnail") or "",
    )
    return submission.to_doc()


@router.post("/submissions/completion", status_code=201)
def submit_completion(body: Dict[str, Any], service: LevelList = Depends(get_levellist)):
    """Claim a completion of a published level."""

    submission = service.submissions.submit_completion(
        submitter=body_text(body, "submitter"),
        level_ref=body.get("level_ref") or "",
        youtube=body.get("youtube") or "",
        raw=body.get("raw") or "",
        percent=body.get("percent"),
    )
    return submission.to_doc()


@router.post("/submissions/{submission_id}/approve")
def approve_submission(
    submission_id: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    """Approve a pending submission, publishing a level or awarding points."""

    approval = service.moderation.approve(submission_id, body_text(body, "moderator"))
    return {
        "submission": approval.submission.to_doc(),
        "level": approval.level.to_doc() if approval.level else None,
        "completion": approval.completion.to_doc() if approval.completion else None,
        "pointsAwarded": approval.points_awarded,
        "duplicate": approval.duplicate,
    }


@router.post("/submissions/{submission_id}/reject")
def reject_submission(
    submission_id: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    submission = service.moderation.reject(
        submission_id,
        body_text(body, "moderator"),
        body_text(body, "reason", required=False),
    )
    return submission.to_doc()


@router.post("/submissions/{submission_id}/withdraw")
def withdraw_submission(
    submission_id: str, body: Dict[str, Any], service: LevelList = Depends(get_levellist)
):
    """Submitter retracts their own pending submission."""

    return service.submissions.withdraw(submission_id, body_text(body, "actor")).to_doc()


__all__ = ["router"]
