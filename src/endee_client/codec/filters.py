"""Filter expressions and per-record filter fields.

Query filters are a JSON array of single-key objects, each naming one
operator::

    [{"genre": {"$eq": "drama"}}, {"year": {"$range": [90, 110]}}]

Records carry a flat JSON object of filterable fields, e.g.
``{"genre": "drama"}``, stored as a string in the wire tuple.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from endee_client.exceptions import FilterError, WireFormatError
from endee_client.types import FilterClause, FilterOperator, MetaValue

_EMPTY_FIELDS = ("", "{}")


def clause_from_dict(raw: Mapping[str, Any]) -> FilterClause:
    """Build a FilterClause from its ``{field: {operator: value}}`` form."""
    if not isinstance(raw, Mapping) or len(raw) != 1:
        raise FilterError(f"Filter clause must be a single-key object, got {raw!r}")
    (field_name, condition), = raw.items()
    if not isinstance(condition, Mapping) or len(condition) != 1:
        raise FilterError(
            f"Condition for '{field_name}' must name exactly one operator."
        )
    (operator, value), = condition.items()
    try:
        op = FilterOperator(operator)
    except ValueError as exc:
        raise FilterError(f"Unsupported filter operator: {operator}") from exc
    return FilterClause(field=field_name, operator=op, value=value)


def coerce_clauses(
    clauses: Iterable[FilterClause | Mapping[str, Any]],
) -> list[FilterClause]:
    """Accept FilterClause objects or raw dicts and return FilterClauses."""
    return [
        clause if isinstance(clause, FilterClause) else clause_from_dict(clause)
        for clause in clauses
    ]


def clauses_to_wire(
    clauses: Iterable[FilterClause | Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """Return the clause list in its JSON-ready wire form."""
    return [clause.to_dict() for clause in coerce_clauses(clauses)]


def serialize_clauses(clauses: Iterable[FilterClause | Mapping[str, Any]]) -> str:
    """Render filter clauses as the canonical JSON array string."""
    return json.dumps(clauses_to_wire(clauses), separators=(",", ":"))


def parse_clauses(data: str | list[Any]) -> list[FilterClause]:
    """Parse a JSON filter array (text or already-decoded list).

    Raises:
        FilterError: If the input is not a valid filter expression.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise FilterError(f"Filter is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise FilterError("Filter must be a JSON array of clauses.")
    return [clause_from_dict(item) for item in data]


def dump_fields(fields: Mapping[str, MetaValue] | None) -> str:
    """Serialize a record's flat filter map; missing maps become ``{}``."""
    return json.dumps(dict(fields or {}), separators=(",", ":"), ensure_ascii=False)


def load_fields(text: str | None) -> dict[str, MetaValue]:
    """Parse a record's filter string from a wire tuple.

    Raises:
        WireFormatError: If the string is not a JSON object.
    """
    if text is None or text in _EMPTY_FIELDS:
        return {}
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        raise WireFormatError(f"Record filter is not valid JSON: {text!r}") from exc
    if not isinstance(parsed, dict):
        raise WireFormatError(f"Record filter must be a JSON object: {text!r}")
    return parsed
