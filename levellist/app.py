"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session, SQLModel

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_error_handlers, register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    DB_RESET,
    HEAD_ADMIN_NAME,
    HEAD_ADMIN_NATIONALITY,
    HEAD_ADMIN_PASSWORD,
    engine,
    setup_logging,
)
from .services import LevelList, SqlEntityStore

logger = structlog.get_logger()


def seed_head_admin() -> None:
    with Session(engine) as session:
        LevelList(SqlEntityStore(session)).users.seed_if_empty(
            HEAD_ADMIN_NAME, HEAD_ADMIN_PASSWORD, HEAD_ADMIN_NATIONALITY
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if DB_RESET:
        logger.warning("database_reset")
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    seed_head_admin()
    yield


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="All Levels List API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("levellist.app:app", host="127.0.0.1", port=3000, reload=True)
