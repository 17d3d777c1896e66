from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pydantic import BaseModel

from errors import AuthError, TransportError
from models.import_report import ImportReport
from pipelines.runner import RunContext
from ports.index import IndexClientPort
from services.dead_letter import DeadLetterWriter
from services.json_stream import encode_ndjson


class ImportBatches:
    """Buffer decoded records and upsert them one full batch at a time.

    A batch that still fails after the client's retries aborts the run, unless
    a dead-letter file is configured: then its documents are written there,
    the batch is counted as failed and the run goes on. Authentication
    failures always abort.
    """

    def __init__(
        self,
        client: IndexClientPort,
        collection: str,
        batch_size: int = 200,
        dead_letter: Optional[DeadLetterWriter] = None,
        on_progress: Optional[Callable[[int], None]] = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.collection = collection
        self.batch_size = batch_size
        self.dead_letter = dead_letter or DeadLetterWriter(None)
        self.on_progress = on_progress

    def run(self, ctx: RunContext) -> RunContext:
        report = ImportReport(collection=self.collection)
        buffer: List[BaseModel] = []
        for record in ctx.records:
            buffer.append(record)
            if len(buffer) >= self.batch_size:
                self._flush(buffer, report)
                buffer = []
        if buffer:
            self._flush(buffer, report)

        report.rows_read = int(ctx.meta.get("rows_read") or 0)
        report.rows_dropped = int(ctx.meta.get("rows_dropped") or 0)
        report.records_decoded = int(ctx.meta.get("records_decoded") or 0)
        report.dead_lettered = self.dead_letter.written
        ctx.meta["report"] = report
        return ctx

    def _flush(self, buffer: List[BaseModel], report: ImportReport) -> None:
        report.batches_sent += 1
        batch_no = report.batches_sent
        try:
            result = self.client.import_documents(self.collection, buffer)
        except AuthError:
            raise
        except TransportError as e:
            if not self.dead_letter.enabled:
                raise
            report.batches_failed += 1
            logging.error(
                f"Batch of {len(buffer)} record(s) failed",
                extra={"step": "import", "status": "failed", "batch": batch_no, "error": e.message},
            )
            _, documents, _ = encode_ndjson(buffer, with_id=True)
            self.dead_letter.write(documents, e.message, batch=batch_no)
            return

        report.documents_imported += result.imported
        report.documents_unserializable += result.unserializable
        if result.rejected:
            report.documents_rejected += len(result.rejected)
            logging.warning(
                f"Index rejected {len(result.rejected)} document(s)",
                extra={"step": "import", "status": "rejected", "batch": batch_no},
            )
            for doc, error in result.rejected:
                self.dead_letter.write([doc], error, batch=batch_no)
        if self.on_progress:
            self.on_progress(report.documents_imported)
