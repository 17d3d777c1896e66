from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from errors import SinkError


class DeadLetterWriter:
    """Append documents that could not be imported to an NDJSON file."""

    def __init__(self, path: Optional[str]) -> None:
        self.path = Path(path) if path else None
        self.written = 0

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def write(self, documents: Iterable[Dict[str, Any]], error: str, batch: Optional[int] = None) -> int:
        if self.path is None:
            return 0
        ts = datetime.now(timezone.utc).isoformat()
        n = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                for doc in documents:
                    entry = {"ts": ts, "batch": batch, "error": error, "document": doc}
                    f.write(json.dumps(entry, ensure_ascii=False) + "\n")
                    n += 1
        except OSError as e:
            raise SinkError(f"Cannot write dead-letter file '{self.path}': {e}") from e
        self.written += n
        return n
