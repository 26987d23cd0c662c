"""Vector index handle, normalization and request assembly."""

from endee_client.vector.assembler import assemble_query, assemble_upsert
from endee_client.vector.base import VectorStore
from endee_client.vector.index import EndeeIndex
from endee_client.vector.normalizer import normalize
from endee_client.vector.validation import validate_ids, validate_index_name

__all__ = [
    "EndeeIndex",
    "VectorStore",
    "assemble_query",
    "assemble_upsert",
    "normalize",
    "validate_ids",
    "validate_index_name",
]
