"""Database configuration and session helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from sqlmodel import Session, create_engine

from .config import DATABASE_URL

_SQLITE_PREFIX = "sqlite:///"

if DATABASE_URL.startswith(_SQLITE_PREFIX):
    _db_path = Path(DATABASE_URL[len(_SQLITE_PREFIX):])
    if str(_db_path) != ":memory:":
        _db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
else:
    engine = create_engine(DATABASE_URL)


def get_session() -> Iterator[Session]:
    """FastAPI dependency that yields a database session."""

    with Session(engine) as session:
        yield session


__all__ = ["engine", "get_session"]
