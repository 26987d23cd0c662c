"""Build validated upsert batches and search payloads for an index."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from endee_client.codec.filters import dump_fields, serialize_clauses
from endee_client.codec.metadata import MetadataCodec
from endee_client.codec.wire import DenseUpsertTuple, HybridUpsertTuple, UpsertTuple
from endee_client.exceptions import ValidationError
from endee_client.types import IndexConfig, QueryOptions, VectorItem
from endee_client.vector.normalizer import normalize
from endee_client.vector.validation import (
    validate_batch_size,
    validate_ids,
    validate_sparse_pair,
)

MAX_TOP_K = 512
MAX_EF = 1024


def assemble_upsert(
    items: Sequence[VectorItem],
    config: IndexConfig,
    codec: MetadataCodec,
) -> list[UpsertTuple]:
    """Validate a write batch and convert it into wire tuples.

    The batch is fully checked before it is returned, so an invalid record
    never lets part of the batch reach the service.

    Args:
        items: Records to write.
        config: Configuration of the target index.
        codec: Metadata codec (carries the optional encryption key).

    Returns:
        One tuple per record; hybrid tuples when the index is hybrid.

    Raises:
        ValidationError: On batch size, ID, dimension or sparse violations.
    """
    validate_batch_size(len(items))
    validate_ids([item.id for item in items])

    batch: list[UpsertTuple] = []
    for item in items:
        normalized = normalize(item.vector, config.dimension, config.space_type)
        indices = item.sparse_indices or []
        values = item.sparse_values or []

        if not config.is_hybrid:
            if indices or values:
                raise ValidationError(
                    "Cannot insert sparse data into a dense-only index. "
                    "Create index with sparse_dimension > 0 for hybrid support."
                )
            batch.append(
                DenseUpsertTuple(
                    id=item.id,
                    meta=codec.compress(item.meta),
                    filter=dump_fields(item.filter),
                    norm=normalized.norm,
                    vector=normalized.vector,
                )
            )
            continue

        if not indices or not values:
            raise ValidationError(
                "Both sparse_indices and sparse_values must be provided "
                f"for hybrid vectors (vector '{item.id}')."
            )
        validate_sparse_pair(indices, values, config.sparse_dimension)
        batch.append(
            HybridUpsertTuple(
                id=item.id,
                meta=codec.compress(item.meta),
                filter=dump_fields(item.filter),
                norm=normalized.norm,
                vector=normalized.vector,
                sparse_indices=list(indices),
                sparse_values=[float(v) for v in values],
            )
        )
    return batch


def assemble_query(options: QueryOptions, config: IndexConfig) -> dict[str, Any]:
    """Validate search options and build the JSON request payload.

    Args:
        options: Search parameters.
        config: Configuration of the target index.

    Returns:
        JSON-ready payload for the search endpoint.

    Raises:
        ValidationError: If any parameter is out of range or inconsistent.
    """
    if options.top_k < 0 or options.top_k > MAX_TOP_K:
        raise ValidationError(f"top_k must be within [0, {MAX_TOP_K}]")
    if options.ef <= 0 or options.ef > MAX_EF:
        raise ValidationError(f"ef must be within (0, {MAX_EF}]")

    indices = options.sparse_indices or []
    values = options.sparse_values or []
    has_sparse = bool(indices or values)
    has_dense = options.vector is not None

    if not has_dense and not has_sparse:
        raise ValidationError(
            "At least one of 'vector' or 'sparse_indices'/'sparse_values' "
            "must be provided."
        )
    if has_sparse:
        if not config.is_hybrid:
            raise ValidationError(
                "Cannot perform sparse search on a dense-only index. "
                "Create index with sparse_dimension > 0 for hybrid support."
            )
        validate_sparse_pair(indices, values, config.sparse_dimension)

    payload: dict[str, Any] = {
        "k": options.top_k,
        "ef": options.ef,
        "include_vectors": options.include_vectors,
    }
    if has_dense:
        normalized = normalize(options.vector, config.dimension, config.space_type)
        payload["vector"] = normalized.vector
    if has_sparse:
        payload["sparse_indices"] = list(indices)
        payload["sparse_values"] = [float(v) for v in values]
    if options.filter:
        payload["filter"] = serialize_clauses(options.filter)
    return payload
