from __future__ import annotations

from typing import Iterable, Protocol

from pydantic import BaseModel

from models.collection_schema import CollectionSchema


class IndexClientPort(Protocol):
    def create_collection(self, schema: CollectionSchema) -> bool:
        ...

    def import_documents(self, collection: str, records: Iterable[BaseModel]):
        ...
