from __future__ import annotations

import pytest

from errors import SchemaError


def test_builtin_layouts_registered():
    import sources  # noqa: F401
    from sources.registry import available_layouts, get_layout

    assert {"tax", "company"} <= set(available_layouts())
    assert get_layout("tax").shape == "tax"


def test_unknown_layout_raises():
    from sources.registry import get_layout
    with pytest.raises(KeyError):
        get_layout("does_not_exist")


def test_tax_layout_fixed_positions():
    from sources.tax_records import TAX_LAYOUT

    assert TAX_LAYOUT.positional() == {
        "cvr": 0,
        "se": 2,
        "company_name": 1,
        "company_type": 5,
        "year": 3,
        "taxable_income": 8,
        "deficit": 9,
        "corporate_tax": 10,
    }


def test_resolve_header_by_name_in_any_order():
    from sources.tax_records import TAX_LAYOUT

    header = [
        "\ufeffNavn", "CVR-nr.", "Indkomstår", "SE-nr.", "selskabstype",
        "Selskabsskat", "Skattepligtig indkomst", "Underskud",
    ]
    positions = TAX_LAYOUT.resolve_header(header)
    assert positions["company_name"] == 0
    assert positions["cvr"] == 1
    assert positions["company_type"] == 4
    assert positions["corporate_tax"] == 5


def test_resolve_header_tolerates_missing_optional_columns():
    from sources.tax_records import TAX_LAYOUT

    positions = TAX_LAYOUT.resolve_header(["CVR-nr.", "Navn", "SE-nr.", "Indkomstår", "Selskabstype"])
    assert "deficit" not in positions


def test_resolve_header_missing_required_is_schema_error():
    from sources.companies import COMPANY_LAYOUT

    with pytest.raises(SchemaError) as exc:
        COMPANY_LAYOUT.resolve_header(["CVR-nr.", "Adresse"])
    assert "Navn" in str(exc.value)


def test_collection_schema_for_tax_layout():
    from sources.tax_records import TAX_LAYOUT

    payload = TAX_LAYOUT.collection_schema("tax_records").to_payload()
    assert payload["name"] == "tax_records"
    assert payload["default_sorting_field"] == "cvr"
    fields = {f["name"]: f for f in payload["fields"]}
    assert [f["name"] for f in payload["fields"]][0] == "cvr"
    assert fields["cvr"]["type"] == "int64"
    assert fields["year"]["type"] == "int32"
    assert fields["company_name"]["type"] == "string"
    assert fields["company_type"]["facet"] is True
    assert fields["cvr"]["facet"] is False
    assert fields["deficit"]["optional"] is True
    assert "optional" not in fields["cvr"]
