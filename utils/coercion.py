from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Union


_INT_RE = re.compile(r"^[+-]?[0-9]+$")


@dataclass(frozen=True)
class Present:
    value: Any


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Malformed:
    text: str
    reason: str = "unparsable"


Coerced = Union[Present, Absent, Malformed]

ABSENT = Absent()


def _trimmed(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def coerce_int(raw: Optional[str], bits: int = 64, signed: bool = True) -> Coerced:
    """Parse a cell into an integer that fits a fixed bit width.

    Missing or blank cells are Absent; anything else that does not parse or
    does not fit is Malformed. Never raises.
    """
    text = _trimmed(raw)
    if text is None:
        return ABSENT
    if not _INT_RE.match(text):
        return Malformed(text)
    if not signed and text.startswith("-"):
        return Malformed(text, "negative value for unsigned field")
    value = int(text)
    if signed:
        lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        lo, hi = 0, (1 << bits) - 1
    if value < lo or value > hi:
        return Malformed(text, f"out of range for {'i' if signed else 'u'}{bits}")
    return Present(value)


def coerce_uint(raw: Optional[str], bits: int = 32) -> Coerced:
    return coerce_int(raw, bits=bits, signed=False)


def coerce_str(raw: Optional[str]) -> Coerced:
    text = _trimmed(raw)
    if text is None:
        return ABSENT
    return Present(text)
