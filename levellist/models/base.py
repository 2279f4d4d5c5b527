"""Shared base for persisted records."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Record stored inside a collection, serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_doc(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


__all__ = ["Record"]
