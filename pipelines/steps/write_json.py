from __future__ import annotations

from typing import IO

from pipelines.runner import RunContext
from services.json_stream import write_json_array


class WriteJsonArray:
    def __init__(self, sink: IO[str]) -> None:
        self.sink = sink

    def run(self, ctx: RunContext) -> RunContext:
        ctx.meta["records_written"] = write_json_array(ctx.records, self.sink)
        return ctx
