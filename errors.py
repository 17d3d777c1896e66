"""Error kinds surfaced to the top-level CLI handler.

Each kind carries the process exit code used when it aborts a run. Code 2 is
left to argparse for a malformed command line. Per-record problems (decode or
serialization failures) are never raised as these; they are logged and
counted where they happen.
"""
from __future__ import annotations


class IngestError(Exception):
    """Base class for fatal ingestion failures."""

    kind = "ingest"
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SourceError(IngestError):
    """The input could not be opened or read."""

    kind = "io"
    exit_code = 3


class SinkError(IngestError):
    """The output could not be opened or written."""

    kind = "io"
    exit_code = 4


class SchemaError(IngestError):
    """Input header or collection declaration does not fit the record layout."""

    kind = "schema"
    exit_code = 5


class TransportError(IngestError):
    """The remote index could not be reached or answered with a failure."""

    kind = "transport"
    exit_code = 6

    def __init__(self, message: str, status_code: int | None = None, retryable: bool = False) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class AuthError(TransportError):
    """The remote index rejected the API key."""

    kind = "auth"
    exit_code = 7
