"""MessagePack tuple schema for upserts, search hits and point lookups.

Every payload is an array of positional tuples. The tuple kind is identified
by its arity:

==========================  =====  ==========================================
Variant                     Arity  Fields
==========================  =====  ==========================================
DenseUpsertTuple            5      id, meta, filter, norm, vector
HybridUpsertTuple           7      ... + sparse_indices, sparse_values
SearchHitTuple              5      similarity, id, meta, filter, norm
SearchHitVectorTuple        6      ... + vector
LookupTuple                 5      id, meta, filter, norm, vector
==========================  =====  ==========================================

The service may send integral doubles as MessagePack integers, so every
numeric field is read through coerce_number.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import msgpack
from msgpack.exceptions import UnpackException

from endee_client.exceptions import WireFormatError


def coerce_number(value: Any, field: str) -> float:
    """Return a wire numeric (int or float encoded) as a float.

    Raises:
        WireFormatError: If the value is not a number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise WireFormatError(
            f"Expected numeric value for {field}, got {type(value).__name__}"
        )
    return float(value)


def _coerce_numbers(value: Any, field: str) -> list[float]:
    items = _expect(value, list, field)
    return [coerce_number(item, f"{field}[{i}]") for i, item in enumerate(items)]


def _coerce_ints(value: Any, field: str) -> list[int]:
    items = _expect(value, list, field)
    for i, item in enumerate(items):
        if isinstance(item, bool) or not isinstance(item, int):
            raise WireFormatError(
                f"Expected integer for {field}[{i}], got {type(item).__name__}"
            )
    return list(items)


def _expect(value: Any, expected: type, field: str) -> Any:
    if not isinstance(value, expected):
        raise WireFormatError(
            f"Expected {expected.__name__} for {field}, got {type(value).__name__}"
        )
    return value


def _expect_arity(raw: Any, arities: tuple[int, ...], kind: str) -> list[Any]:
    tuple_ = _expect(raw, list, kind)
    if len(tuple_) not in arities:
        expected = " or ".join(str(a) for a in arities)
        raise WireFormatError(
            f"{kind} must have {expected} elements, got {len(tuple_)}"
        )
    return tuple_


@dataclass(frozen=True)
class DenseUpsertTuple:
    """Upsert tuple for a dense-only index."""

    id: str
    meta: bytes
    filter: str
    norm: float
    vector: list[float]

    def to_wire(self) -> list[Any]:
        return [self.id, self.meta, self.filter, float(self.norm), _floats(self.vector)]


@dataclass(frozen=True)
class HybridUpsertTuple:
    """Upsert tuple for a hybrid (dense + sparse) index."""

    id: str
    meta: bytes
    filter: str
    norm: float
    vector: list[float]
    sparse_indices: list[int]
    sparse_values: list[float]

    def to_wire(self) -> list[Any]:
        return [
            self.id,
            self.meta,
            self.filter,
            float(self.norm),
            _floats(self.vector),
            [int(i) for i in self.sparse_indices],
            _floats(self.sparse_values),
        ]


@dataclass(frozen=True)
class SearchHitTuple:
    """Search hit without the stored vector."""

    similarity: float
    id: str
    meta: bytes
    filter: str
    norm: float


@dataclass(frozen=True)
class SearchHitVectorTuple:
    """Search hit carrying the stored vector."""

    similarity: float
    id: str
    meta: bytes
    filter: str
    norm: float
    vector: list[float]


@dataclass(frozen=True)
class LookupTuple:
    """Point lookup result; the vector is always present."""

    id: str
    meta: bytes
    filter: str
    norm: float
    vector: list[float]


type UpsertTuple = DenseUpsertTuple | HybridUpsertTuple
type SearchHit = SearchHitTuple | SearchHitVectorTuple


def _floats(values: Sequence[float]) -> list[float]:
    return [float(v) for v in values]


def _unpack(data: bytes) -> Any:
    try:
        return msgpack.unpackb(data, raw=False)
    except (ValueError, TypeError, UnpackException) as exc:
        raise WireFormatError(f"Invalid MessagePack payload: {exc}") from exc


def _unpack_array(data: bytes, kind: str) -> list[Any]:
    return _expect(_unpack(data), list, kind)


def encode_upsert_batch(batch: Sequence[UpsertTuple]) -> bytes:
    """Pack an upsert batch as a count-prefixed array of tuples.

    Raises:
        WireFormatError: If an element is not an upsert tuple variant.
    """
    rows = []
    for item in batch:
        if not isinstance(item, (DenseUpsertTuple, HybridUpsertTuple)):
            raise WireFormatError(
                f"Cannot encode {type(item).__name__} as an upsert tuple"
            )
        rows.append(item.to_wire())
    try:
        return msgpack.packb(rows, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as exc:
        raise WireFormatError(f"Failed to pack vectors: {exc}") from exc


def decode_upsert_batch(data: bytes) -> list[UpsertTuple]:
    """Unpack an upsert batch into dense or hybrid tuples by arity."""
    decoded: list[UpsertTuple] = []
    for raw in _unpack_array(data, "upsert batch"):
        row = _expect_arity(raw, (5, 7), "upsert tuple")
        vector_id = _expect(row[0], str, "id")
        meta = _expect(row[1], bytes, "meta")
        filter_text = _expect(row[2], str, "filter")
        norm = coerce_number(row[3], "norm")
        vector = _coerce_numbers(row[4], "vector")
        if len(row) == 5:
            decoded.append(
                DenseUpsertTuple(vector_id, meta, filter_text, norm, vector)
            )
            continue
        decoded.append(
            HybridUpsertTuple(
                id=vector_id,
                meta=meta,
                filter=filter_text,
                norm=norm,
                vector=vector,
                sparse_indices=_coerce_ints(row[5], "sparse_indices"),
                sparse_values=_coerce_numbers(row[6], "sparse_values"),
            )
        )
    return decoded


def decode_search_results(data: bytes) -> list[SearchHit]:
    """Unpack a search response; a sixth element means the vector is included."""
    hits: list[SearchHit] = []
    for raw in _unpack_array(data, "search results"):
        row = _expect_arity(raw, (5, 6), "search result tuple")
        similarity = coerce_number(row[0], "similarity")
        vector_id = _expect(row[1], str, "id")
        meta = _expect(row[2], bytes, "meta")
        filter_text = _expect(row[3], str, "filter")
        norm = coerce_number(row[4], "norm")
        if len(row) == 5:
            hits.append(SearchHitTuple(similarity, vector_id, meta, filter_text, norm))
        else:
            hits.append(
                SearchHitVectorTuple(
                    similarity=similarity,
                    id=vector_id,
                    meta=meta,
                    filter=filter_text,
                    norm=norm,
                    vector=_coerce_numbers(row[5], "vector"),
                )
            )
    return hits


def decode_lookup(data: bytes) -> LookupTuple:
    """Unpack a single point-lookup tuple."""
    row = _expect_arity(_unpack(data), (5,), "lookup tuple")
    return LookupTuple(
        id=_expect(row[0], str, "id"),
        meta=_expect(row[1], bytes, "meta"),
        filter=_expect(row[2], str, "filter"),
        norm=coerce_number(row[3], "norm"),
        vector=_coerce_numbers(row[4], "vector"),
    )
