from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

UINT16_MAX = (1 << 16) - 1
UINT32_MAX = (1 << 32) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class TaxRecord(BaseModel):
    """One company's corporate tax assessment for one income year."""

    cvr: int = Field(ge=0, le=UINT32_MAX)
    se: int = Field(ge=0, le=UINT32_MAX)
    company_name: str = Field(min_length=1)
    company_type: str = Field(min_length=1)
    year: int = Field(ge=0, le=UINT16_MAX)
    taxable_income: int | None = Field(default=None, ge=INT64_MIN, le=INT64_MAX)
    deficit: int | None = Field(default=None, ge=INT64_MIN, le=INT64_MAX)
    corporate_tax: int | None = Field(default=None, ge=INT64_MIN, le=INT64_MAX)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def document_id(self) -> str:
        # One assessment per company, SE unit and year
        return f"{self.cvr}-{self.se}-{self.year}"
