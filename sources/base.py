from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from errors import SchemaError
from models.collection_schema import CollectionField, CollectionSchema
from utils.coercion import Coerced, coerce_int, coerce_str, coerce_uint


FieldKind = Literal["u16", "u32", "i64", "str"]

# Index field type used when declaring a collection for each kind
INDEX_TYPES: Dict[str, str] = {
    "u16": "int32",
    "u32": "int64",
    "i64": "int64",
    "str": "string",
}


def coerce_cell(kind: FieldKind, raw: Optional[str]) -> Coerced:
    if kind == "str":
        return coerce_str(raw)
    if kind == "u16":
        return coerce_uint(raw, bits=16)
    if kind == "u32":
        return coerce_uint(raw, bits=32)
    return coerce_int(raw, bits=64)


@dataclass(frozen=True)
class ColumnSpec:
    field: str
    header: str
    position: int
    kind: FieldKind
    required: bool = True
    facet: bool = False


def _normalize_header(name: str) -> str:
    return name.replace("\ufeff", "").strip().casefold()


@dataclass(frozen=True)
class RecordLayout:
    """Column name -> record field -> type mapping for one record shape.

    Positions are used for header-less input; header names are resolved
    against the first row when the input carries one.
    """

    shape: str
    model: Type[BaseModel]
    columns: Tuple[ColumnSpec, ...]
    sort_field: str = "cvr"

    def positional(self) -> Dict[str, int]:
        return {c.field: c.position for c in self.columns}

    def resolve_header(self, header: Sequence[str]) -> Dict[str, int]:
        lookup = {_normalize_header(h): i for i, h in enumerate(header)}
        positions: Dict[str, int] = {}
        missing: List[str] = []
        for col in self.columns:
            idx = lookup.get(_normalize_header(col.header))
            if idx is None:
                if col.required:
                    missing.append(col.header)
                continue
            positions[col.field] = idx
        if missing:
            raise SchemaError(
                f"Input header is missing required column(s) for '{self.shape}': {', '.join(missing)}"
            )
        return positions

    def collection_schema(self, name: str) -> CollectionSchema:
        fields = [
            CollectionField(
                name=c.field,
                type=INDEX_TYPES[c.kind],
                facet=c.facet,
                optional=None if c.required else True,
            )
            for c in self.columns
        ]
        return CollectionSchema(name=name, fields=fields, default_sorting_field=self.sort_field)
