"""Identifier and batch-shape checks run before anything reaches the wire."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from endee_client.exceptions import (
    BatchSizeError,
    DuplicateIdError,
    EmptyIdError,
    ValidationError,
)

MAX_BATCH_SIZE = 1000
MAX_INDEX_NAME_LENGTH = 48

_INDEX_NAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def validate_index_name(name: str | None) -> bool:
    """Return True if the name is alphanumeric/underscore and under 48 chars."""
    if not name:
        return False
    if len(name) >= MAX_INDEX_NAME_LENGTH:
        return False
    return _INDEX_NAME_PATTERN.fullmatch(name) is not None


def validate_ids(ids: Iterable[str | None]) -> None:
    """Check that every ID is non-empty and unique within the batch.

    The whole batch is scanned so the error lists every duplicated ID, not
    only the first one found.

    Raises:
        EmptyIdError: On the first empty or missing ID.
        DuplicateIdError: If any ID occurs more than once.
    """
    seen: set[str] = set()
    duplicates: dict[str, None] = {}

    for vector_id in ids:
        if not vector_id:
            raise EmptyIdError()
        if vector_id in seen:
            duplicates[vector_id] = None
        else:
            seen.add(vector_id)

    if duplicates:
        raise DuplicateIdError(list(duplicates))


def validate_batch_size(count: int) -> None:
    """Reject writes larger than MAX_BATCH_SIZE."""
    if count > MAX_BATCH_SIZE:
        raise BatchSizeError(
            f"Cannot insert more than {MAX_BATCH_SIZE} vectors at a time"
        )


def validate_sparse_pair(
    indices: Sequence[int],
    values: Sequence[float],
    sparse_dimension: int,
) -> None:
    """Check a sparse (indices, values) pair against the index sparse dimension."""
    if len(indices) != len(values):
        raise ValidationError(
            "sparse_indices and sparse_values must have the same length. "
            f"Got {len(indices)} indices and {len(values)} values."
        )
    for idx in indices:
        if isinstance(idx, bool) or not isinstance(idx, int):
            raise ValidationError(f"Sparse index {idx!r} is not an integer.")
        if idx < 0 or idx >= sparse_dimension:
            raise ValidationError(
                f"Sparse index {idx} is out of bounds. "
                f"Must be in range [0, {sparse_dimension})."
            )
