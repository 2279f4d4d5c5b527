"""Exception handlers: consistent JSON error responses."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..services import LevelListError

logger = structlog.get_logger()


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LevelListError)
    async def domain_error_handler(request: Request, exc: LevelListError) -> JSONResponse:
        logger.info(
            "request_rejected",
            path=request.url.path,
            error=exc.kind,
            detail=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.kind},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


__all__ = ["register_error_handlers"]
