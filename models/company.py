from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from models.tax_record import UINT32_MAX


class Company(BaseModel):
    """Company name keyed by its CVR number."""

    cvr: int = Field(ge=0, le=UINT32_MAX)
    name: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def document_id(self) -> str:
        return str(self.cvr)
