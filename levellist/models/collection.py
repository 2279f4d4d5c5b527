"""Database model for stored entity collections."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class StoredCollection(SQLModel, table=True):
    """One named collection persisted as a JSON document."""

    __tablename__ = "stored_collection"

    name: str = ORMField(primary_key=True)
    payload_json: str = "[]"
    version: int = 0
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["StoredCollection"]
