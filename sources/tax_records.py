from __future__ import annotations

from models.tax_record import TaxRecord
from sources.base import ColumnSpec, RecordLayout
from sources.registry import register


# Corporate tax list export: positions 4, 6 and 7 are not ingested
TAX_LAYOUT = RecordLayout(
    shape="tax",
    model=TaxRecord,
    columns=(
        ColumnSpec("cvr", "CVR-nr.", 0, "u32"),
        ColumnSpec("se", "SE-nr.", 2, "u32"),
        ColumnSpec("company_name", "Navn", 1, "str"),
        ColumnSpec("company_type", "Selskabstype", 5, "str", facet=True),
        ColumnSpec("year", "Indkomstår", 3, "u16"),
        ColumnSpec("taxable_income", "Skattepligtig indkomst", 8, "i64", required=False),
        ColumnSpec("deficit", "Underskud", 9, "i64", required=False),
        ColumnSpec("corporate_tax", "Selskabsskat", 10, "i64", required=False),
    ),
)


def _register():
    register(TAX_LAYOUT)


_register()
