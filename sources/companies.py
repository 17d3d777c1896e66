from __future__ import annotations

from models.company import Company
from sources.base import ColumnSpec, RecordLayout
from sources.registry import register


COMPANY_LAYOUT = RecordLayout(
    shape="company",
    model=Company,
    columns=(
        ColumnSpec("cvr", "CVR-nr.", 0, "u32"),
        ColumnSpec("name", "Navn", 1, "str"),
    ),
)


def _register():
    register(COMPANY_LAYOUT)


_register()
