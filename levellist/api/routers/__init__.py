"""Aggregate API routers."""

from fastapi import APIRouter

from .audit import router as audit_router
from .bans import router as bans_router
from .leaderboard import router as leaderboard_router
from .levels import router as levels_router
from .submissions import router as submissions_router
from .system import router as system_router
from .users import router as users_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    leaderboard_router,
    users_router,
    submissions_router,
    levels_router,
    bans_router,
    audit_router,
)

__all__ = ["ALL_ROUTERS"]
