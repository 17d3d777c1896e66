from __future__ import annotations

import json
import sys
from typing import IO, Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from errors import SinkError


def open_sink(path: Optional[str]) -> IO[str]:
    """Open the output file for writing, or return stdout when no path is given."""
    if not path or path == "-":
        return sys.stdout
    try:
        return open(path, "w", encoding="utf-8")
    except OSError as e:
        raise SinkError(f"Cannot open destination '{path}': {e}") from e


def record_to_dict(record: BaseModel, with_id: bool = False) -> Dict[str, Any]:
    # Absent optional fields are left out, never written as null
    data = record.model_dump(exclude_none=True)
    if with_id:
        data = {"id": record.document_id(), **data}  # type: ignore[attr-defined]
    return data


def _dumps(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def encode_record(record: BaseModel, with_id: bool = False) -> str:
    return _dumps(record_to_dict(record, with_id=with_id))


def write_json_array(records: Iterable[BaseModel], sink: IO[str]) -> int:
    """Stream records into sink as one JSON array, one element at a time.

    Returns the number of elements written. Any write failure is fatal.
    """
    count = 0
    try:
        sink.write("[")
        for record in records:
            if count:
                sink.write(",")
            sink.write(encode_record(record))
            count += 1
        sink.write("]\n")
        sink.flush()
    except OSError as e:
        raise SinkError(f"Writing output failed: {e}") from e
    return count


def encode_ndjson(records: Iterable[BaseModel], with_id: bool = True) -> Tuple[str, List[Dict[str, Any]], int]:
    """Encode records as newline-delimited JSON for an import body.

    Returns (body, documents, dropped). A record that cannot be serialized
    is skipped and only counted.
    """
    lines: List[str] = []
    documents: List[Dict[str, Any]] = []
    dropped = 0
    for record in records:
        try:
            doc = record_to_dict(record, with_id=with_id)
            line = _dumps(doc)
        except (TypeError, ValueError):
            dropped += 1
            continue
        documents.append(doc)
        lines.append(line)
    return "\n".join(lines), documents, dropped
