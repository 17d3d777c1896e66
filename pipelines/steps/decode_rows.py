from __future__ import annotations

from typing import Iterator, Optional

from pydantic import BaseModel

from pipelines.runner import RunContext
from services.record_decoder import RecordDecoder
from sources.base import RecordLayout
from sources.readers import Row, iter_rows


class DecodeRows:
    """Lazily turn ctx.source lines into decoded records.

    With header=True the first row is consumed right away and resolved
    against the layout, so a bad header fails before anything is emitted.
    """

    def __init__(self, layout: RecordLayout, reader: str = "lines", delimiter: str = ",", header: bool = False) -> None:
        self.layout = layout
        self.reader = reader
        self.delimiter = delimiter
        self.header = header

    def run(self, ctx: RunContext) -> RunContext:
        rows = iter_rows(ctx.source or [], self.reader, self.delimiter)
        decoder: Optional[RecordDecoder] = RecordDecoder(self.layout)
        if self.header:
            first = next(rows, None)
            decoder = RecordDecoder.from_header(self.layout, first[1]) if first else None

        ctx.meta.setdefault("rows_read", 0)
        ctx.meta.setdefault("rows_dropped", 0)
        ctx.meta.setdefault("records_decoded", 0)
        ctx.records = self._decode(rows, decoder, ctx) if decoder else iter(())
        return ctx

    def _decode(self, rows: Iterator[Row], decoder: RecordDecoder, ctx: RunContext) -> Iterator[BaseModel]:
        for lineno, cells in rows:
            ctx.meta["rows_read"] += 1
            record = decoder.decode(cells, line=lineno)
            if record is None:
                ctx.meta["rows_dropped"] += 1
                continue
            ctx.meta["records_decoded"] += 1
            yield record
