from .index import IndexClientPort

__all__ = [
    "IndexClientPort",
]
