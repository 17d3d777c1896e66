from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from sources.base import RecordLayout, coerce_cell
from sources.readers import undecodable_cells
from utils.coercion import Malformed, Present


class RecordDecoder:
    """Turn one split row into a record of the layout's shape, or None.

    Any required field that is missing or malformed drops the whole row. An
    optional field that does not parse is left out of the record.
    """

    def __init__(self, layout: RecordLayout, positions: Optional[Dict[str, int]] = None) -> None:
        self.layout = layout
        self.positions = positions if positions is not None else layout.positional()

    @classmethod
    def from_header(cls, layout: RecordLayout, header: Sequence[str]) -> "RecordDecoder":
        return cls(layout, layout.resolve_header(header))

    def _cell(self, cells: Sequence[str], field: str) -> Optional[str]:
        idx = self.positions.get(field)
        if idx is None or idx >= len(cells):
            return None
        return cells[idx]

    def decode(self, cells: Sequence[str], line: Optional[int] = None) -> Optional[BaseModel]:
        bad = undecodable_cells(cells)
        if bad:
            logging.warning(
                f"Failed to read record: invalid UTF-8 in column(s) {', '.join(str(i) for i in bad)}",
                extra={"step": "decode", "status": "dropped", "line": line},
            )
            return None

        values: Dict[str, object] = {}
        missing: List[str] = []
        malformed: List[str] = []
        for col in self.layout.columns:
            result = coerce_cell(col.kind, self._cell(cells, col.field))
            if isinstance(result, Present):
                values[col.field] = result.value
            elif isinstance(result, Malformed):
                if col.required:
                    malformed.append(f"{col.field}={result.text!r} ({result.reason})")
                else:
                    logging.debug(
                        f"Omitting malformed optional field {col.field}={result.text!r}",
                        extra={"step": "decode", "status": "omitted", "line": line},
                    )
            elif col.required:
                missing.append(col.field)

        if missing or malformed:
            parts = []
            if missing:
                parts.append(f"missing required: {', '.join(missing)}")
            if malformed:
                parts.append(f"malformed: {', '.join(malformed)}")
            logging.warning(
                f"Failed to read record: {'; '.join(parts)}",
                extra={"step": "decode", "status": "dropped", "line": line},
            )
            return None

        try:
            return self.layout.model(**values)
        except ValidationError as e:
            logging.warning(
                f"Failed to read record: {e.error_count()} validation error(s)",
                extra={"step": "decode", "status": "dropped", "line": line, "error": str(e).splitlines()[0]},
            )
            return None
