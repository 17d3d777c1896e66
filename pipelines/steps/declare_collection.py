from __future__ import annotations

from models.collection_schema import CollectionSchema
from pipelines.runner import RunContext
from ports.index import IndexClientPort


class DeclareCollection:
    def __init__(self, client: IndexClientPort, schema: CollectionSchema) -> None:
        self.client = client
        self.schema = schema

    def run(self, ctx: RunContext) -> RunContext:
        ctx.meta["collection_created"] = self.client.create_collection(self.schema)
        return ctx
