from __future__ import annotations

from typing import Dict

from sources.base import RecordLayout


_REGISTRY: Dict[str, RecordLayout] = {}


def register(layout: RecordLayout) -> None:
    _REGISTRY[layout.shape] = layout


def get_layout(shape: str) -> RecordLayout:
    if shape not in _REGISTRY:
        raise KeyError(f"Unknown record shape: {shape}")
    return _REGISTRY[shape]


def available_layouts() -> Dict[str, RecordLayout]:
    return dict(_REGISTRY)
