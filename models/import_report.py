from __future__ import annotations

from pydantic import BaseModel


class ImportReport(BaseModel):
    """Counters for one import run; printed as the partial-success summary."""

    collection: str
    rows_read: int = 0
    records_decoded: int = 0
    rows_dropped: int = 0
    batches_sent: int = 0
    batches_failed: int = 0
    documents_imported: int = 0
    documents_rejected: int = 0
    documents_unserializable: int = 0
    dead_lettered: int = 0

    @property
    def partial(self) -> bool:
        return bool(self.batches_failed or self.documents_rejected)
