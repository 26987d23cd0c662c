"""Binary, metadata and filter codecs."""

from endee_client.codec.filters import (
    dump_fields,
    load_fields,
    parse_clauses,
    serialize_clauses,
)
from endee_client.codec.metadata import MetadataCodec, compress, decompress
from endee_client.codec.wire import (
    DenseUpsertTuple,
    HybridUpsertTuple,
    LookupTuple,
    SearchHitTuple,
    SearchHitVectorTuple,
    coerce_number,
    decode_lookup,
    decode_search_results,
    decode_upsert_batch,
    encode_upsert_batch,
)

__all__ = [
    "DenseUpsertTuple",
    "HybridUpsertTuple",
    "LookupTuple",
    "MetadataCodec",
    "SearchHitTuple",
    "SearchHitVectorTuple",
    "coerce_number",
    "compress",
    "decode_lookup",
    "decode_search_results",
    "decode_upsert_batch",
    "decompress",
    "dump_fields",
    "encode_upsert_batch",
    "load_fields",
    "parse_clauses",
    "serialize_clauses",
]
