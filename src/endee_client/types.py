"""Shared datatypes for records, queries and index configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from endee_client.exceptions import FilterError, ValidationError

type MetaValue = (
    str | int | float | bool | None | list[MetaValue] | dict[str, MetaValue]
)

DEFAULT_TOP_K = 10
DEFAULT_EF = 128
DEFAULT_M = 16
DEFAULT_EF_CONSTRUCTION = 128

RANGE_MIN = 0
RANGE_MAX = 999


class SpaceType(Enum):
    """Distance metric configured on an index."""

    COSINE = "cosine"
    L2 = "l2"
    IP = "ip"

    @classmethod
    def from_value(cls, value: str) -> SpaceType:
        """Look up a space type case-insensitively."""
        for member in cls:
            if member.value == value.lower():
                return member
        raise ValidationError(f"Unknown space type: {value}")


class Precision(Enum):
    """Quantization precision tag, forwarded to the service verbatim."""

    BINARY = "binary"
    INT8D = "int8d"
    INT16D = "int16d"
    FLOAT32 = "float32"
    FLOAT16 = "float16"

    @classmethod
    def from_value(cls, value: str) -> Precision:
        """Look up a precision case-insensitively."""
        for member in cls:
            if member.value == value.lower():
                return member
        raise ValidationError(f"Unknown precision: {value}")


class FilterOperator(Enum):
    """Operators understood by the filter grammar."""

    EQ = "$eq"
    IN = "$in"
    RANGE = "$range"


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class FilterClause:
    """A single field/operator/value condition.

    Multiple clauses are combined with logical AND by the service.
    """

    field: str
    operator: FilterOperator
    value: Any

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field:
            raise FilterError("Filter field must be a non-empty string.")
        if self.operator is FilterOperator.IN:
            if not isinstance(self.value, list):
                raise FilterError(f"$in on '{self.field}' requires a list value.")
        elif self.operator is FilterOperator.RANGE:
            self._check_range()
        elif isinstance(self.value, (list, dict)):
            raise FilterError(f"$eq on '{self.field}' requires a scalar value.")

    def _check_range(self) -> None:
        value = self.value
        if (
            not isinstance(value, (list, tuple))
            or len(value) != 2
            or not all(_is_number(bound) for bound in value)
        ):
            raise FilterError(
                f"$range on '{self.field}' requires a [low, high] numeric pair."
            )
        for bound in value:
            if bound < RANGE_MIN or bound > RANGE_MAX:
                raise FilterError(
                    f"$range bounds must be within [{RANGE_MIN}, {RANGE_MAX}], "
                    f"got {list(value)}"
                )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form ``{field: {operator: value}}``."""
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {self.field: {self.operator.value: value}}


@dataclass
class VectorItem:
    """A single vector record to upsert."""

    id: str
    vector: list[float]
    meta: dict[str, MetaValue] | None = None
    filter: dict[str, MetaValue] | None = None
    sparse_indices: list[int] | None = None
    sparse_values: list[float] | None = None


@dataclass(frozen=True)
class NormalizedVector:
    """A dense vector after metric-specific normalization."""

    vector: list[float]
    norm: float


@dataclass
class QueryOptions:
    """Parameters for a similarity search."""

    vector: list[float] | None = None
    top_k: int = DEFAULT_TOP_K
    ef: int = DEFAULT_EF
    filter: list[FilterClause | dict[str, Any]] | None = None
    include_vectors: bool = False
    sparse_indices: list[int] | None = None
    sparse_values: list[float] | None = None


@dataclass
class QueryResult:
    """A single search hit reconstructed from the wire."""

    id: str
    similarity: float
    distance: float
    meta: dict[str, MetaValue]
    norm: float
    filter: dict[str, MetaValue] = field(default_factory=dict)
    vector: list[float] | None = None


@dataclass
class VectorInfo:
    """A stored vector returned by a point lookup."""

    id: str
    meta: dict[str, MetaValue]
    norm: float
    vector: list[float]
    filter: dict[str, MetaValue] = field(default_factory=dict)


@dataclass(frozen=True)
class IndexConfig:
    """Read-only configuration of an index, captured when a handle is built."""

    name: str
    dimension: int
    space_type: SpaceType = SpaceType.COSINE
    sparse_dimension: int = 0
    precision: Precision = Precision.INT8D
    m: int = DEFAULT_M
    count: int = 0
    checksum: int = -1

    @property
    def is_hybrid(self) -> bool:
        """Whether the index accepts sparse components."""
        return self.sparse_dimension > 0


@dataclass(frozen=True)
class CreateIndexOptions:
    """Parameters for creating an index."""

    name: str
    dimension: int
    space_type: SpaceType = SpaceType.COSINE
    m: int = DEFAULT_M
    ef_con: int = DEFAULT_EF_CONSTRUCTION
    precision: Precision = Precision.INT8D
    version: int | None = None
    sparse_dimension: int | None = None


@dataclass(frozen=True)
class IndexDescription:
    """Summary returned by ``EndeeIndex.describe``."""

    name: str
    space_type: SpaceType
    dimension: int
    sparse_dimension: int
    is_hybrid: bool
    count: int
    precision: Precision
    m: int

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "space_type": self.space_type.value,
            "dimension": self.dimension,
            "sparse_dimension": self.sparse_dimension,
            "is_hybrid": self.is_hybrid,
            "count": self.count,
            "precision": self.precision.value,
            "m": self.m,
        }
