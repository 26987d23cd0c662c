"""Endee index handle."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from endee_client.codec.filters import clauses_to_wire, load_fields
from endee_client.codec.metadata import MetadataCodec
from endee_client.codec.wire import (
    SearchHitVectorTuple,
    decode_lookup,
    decode_search_results,
    encode_upsert_batch,
)
from endee_client.exceptions import ValidationError
from endee_client.transport import HttpTransport
from endee_client.types import (
    FilterClause,
    IndexConfig,
    IndexDescription,
    QueryOptions,
    QueryResult,
    VectorInfo,
    VectorItem,
)
from endee_client.vector.assembler import assemble_query, assemble_upsert
from endee_client.vector.base import VectorStore

logger = logging.getLogger(__name__)


class EndeeIndex(VectorStore):
    """Endee-backed vector store bound to a single index."""

    def __init__(
        self,
        transport: HttpTransport,
        config: IndexConfig,
        codec: MetadataCodec | None = None,
    ) -> None:
        """Initialize the index handle.

        Args:
            transport: Shared HTTP transport of the owning client.
            config: Index configuration, treated as read-only.
            codec: Metadata codec; defaults to an unencrypted one.
        """
        self._transport = transport
        self._config = config
        self._codec = codec or MetadataCodec()
        self._path = f"/index/{quote(config.name, safe='')}"

    def __str__(self) -> str:
        return self._config.name

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> IndexConfig:
        return self._config

    @property
    def is_hybrid(self) -> bool:
        return self._config.is_hybrid

    async def upsert(self, items: Sequence[VectorItem]) -> str:
        """Insert or update vectors in the index."""
        batch = assemble_upsert(items, self._config, self._codec)
        body = encode_upsert_batch(batch)
        logger.debug("Upserting %d vectors into %s", len(batch), self.name)

        await self._transport.post_msgpack(
            f"{self._path}/vector/insert",
            body,
            operation="Failed to upsert vectors",
        )
        return "Vectors inserted successfully"

    async def query(self, options: QueryOptions) -> list[QueryResult]:
        """Search the index and decode the hits."""
        payload = assemble_query(options, self._config)
        body = await self._transport.post_json(
            f"{self._path}/search",
            payload,
            operation="Failed to query index",
        )

        results = []
        for hit in decode_search_results(body):
            result = QueryResult(
                id=hit.id,
                similarity=hit.similarity,
                # Fixed transform for every space type.
                distance=1 - hit.similarity,
                meta=self._codec.decompress(hit.meta),
                norm=hit.norm,
                filter=load_fields(hit.filter),
            )
            if options.include_vectors and isinstance(hit, SearchHitVectorTuple):
                result.vector = hit.vector
            results.append(result)
        return results

    async def get_vector(self, vector_id: str) -> VectorInfo:
        """Fetch a stored vector by ID."""
        if not vector_id:
            raise ValidationError("Vector id must be a non-empty string.")
        body = await self._transport.post_json(
            f"{self._path}/vector/get",
            {"id": vector_id},
            operation="Failed to get vector",
        )
        found = decode_lookup(body)
        return VectorInfo(
            id=found.id,
            meta=self._codec.decompress(found.meta),
            filter=load_fields(found.filter),
            norm=found.norm,
            vector=found.vector,
        )

    async def delete_vector(self, vector_id: str) -> str:
        """Delete a vector by ID and return the service response text."""
        if not vector_id:
            raise ValidationError("Vector id must be a non-empty string.")
        body = await self._transport.delete(
            f"{self._path}/vector/{quote(vector_id, safe='')}/delete",
            operation="Failed to delete vector",
        )
        return body.decode("utf-8")

    async def delete_with_filter(
        self, filter: Sequence[FilterClause | dict[str, Any]]
    ) -> str:
        """Delete vectors matching the filter and return the response text."""
        clauses = clauses_to_wire(filter)
        if not clauses:
            raise ValidationError("delete_with_filter requires at least one clause.")
        body = await self._transport.delete(
            f"{self._path}/vectors/delete",
            {"filter": clauses},
            operation="Failed to delete vectors with filter",
        )
        return body.decode("utf-8")

    def describe(self) -> IndexDescription:
        """Return the index configuration captured when the handle was built."""
        config = self._config
        return IndexDescription(
            name=config.name,
            space_type=config.space_type,
            dimension=config.dimension,
            sparse_dimension=config.sparse_dimension,
            is_hybrid=config.is_hybrid,
            count=config.count,
            precision=config.precision,
            m=config.m,
        )
