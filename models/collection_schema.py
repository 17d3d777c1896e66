from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class CollectionField(BaseModel):
    name: str
    type: str
    facet: bool = False
    optional: bool | None = None

    model_config = ConfigDict(frozen=True)


class CollectionSchema(BaseModel):
    """Collection declaration sent once to the index before importing."""

    name: str
    fields: List[CollectionField] = Field(default_factory=list)
    default_sorting_field: str = "cvr"

    model_config = ConfigDict(frozen=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
