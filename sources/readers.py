from __future__ import annotations

import csv
import re
import sys
from typing import IO, Iterable, Iterator, List, Optional, Sequence, Tuple

from errors import SourceError


Row = Tuple[int, List[str]]

# Bytes that are not valid UTF-8 survive decoding as lone surrogates
_UNDECODABLE = re.compile("[\udc80-\udcff]")


def open_source(path: Optional[str]) -> IO[str]:
    """Open the input for reading, or return stdin when no path is given.

    Invalid UTF-8 does not stop the read; it reaches the rows as escaped
    characters so the decoder can drop just the affected row.
    """
    if not path or path == "-":
        if hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(encoding="utf-8", errors="surrogateescape", newline="")
        return sys.stdin
    try:
        return open(path, "r", encoding="utf-8", errors="surrogateescape", newline="")
    except OSError as e:
        raise SourceError(f"Cannot open source '{path}': {e}") from e


def undecodable_cells(cells: Sequence[str]) -> List[int]:
    """Positions of cells that held bytes which were not valid UTF-8."""
    return [i for i, cell in enumerate(cells) if _UNDECODABLE.search(cell)]


def iter_line_rows(stream: Iterable[str], delimiter: str = ",") -> Iterator[Row]:
    """Literal split on the delimiter: no quoting, no escaping."""
    try:
        for lineno, line in enumerate(stream, start=1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            yield lineno, line.split(delimiter)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Failed to read input: {e}") from e


def iter_csv_rows(stream: Iterable[str], delimiter: str = ",") -> Iterator[Row]:
    """Quote-tolerant rows via the csv module; line numbers follow the reader."""
    reader = csv.reader(stream, delimiter=delimiter, skipinitialspace=True)
    try:
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            yield reader.line_num, row
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SourceError(f"Failed to read input: {e}") from e


READERS = {
    "lines": iter_line_rows,
    "csv": iter_csv_rows,
}


def iter_rows(stream: Iterable[str], reader: str = "lines", delimiter: str = ",") -> Iterator[Row]:
    if reader not in READERS:
        raise KeyError(f"Unknown reader: {reader}")
    return READERS[reader](stream, delimiter)
