"""Python client for the Endee vector database."""

from endee_client.client import EndeeClient
from endee_client.config import Settings
from endee_client.exceptions import (
    CodecError,
    EndeeApiError,
    EndeeError,
    TransportError,
    ValidationError,
    WireFormatError,
)
from endee_client.types import (
    CreateIndexOptions,
    FilterClause,
    FilterOperator,
    IndexConfig,
    Precision,
    QueryOptions,
    QueryResult,
    SpaceType,
    VectorInfo,
    VectorItem,
)
from endee_client.vector.index import EndeeIndex

__all__ = [
    "CodecError",
    "CreateIndexOptions",
    "EndeeApiError",
    "EndeeClient",
    "EndeeError",
    "EndeeIndex",
    "FilterClause",
    "FilterOperator",
    "IndexConfig",
    "Precision",
    "QueryOptions",
    "QueryResult",
    "Settings",
    "SpaceType",
    "TransportError",
    "ValidationError",
    "VectorInfo",
    "VectorItem",
    "WireFormatError",
]
