"""Unit tests for ID and index-name validation."""

import pytest

from endee_client.exceptions import (
    BatchSizeError,
    DuplicateIdError,
    EmptyIdError,
    ValidationError,
)
from endee_client.vector.validation import (
    MAX_BATCH_SIZE,
    validate_batch_size,
    validate_ids,
    validate_index_name,
    validate_sparse_pair,
)


# --- validate_index_name() tests ---


@pytest.mark.parametrize("name", ["movies", "Movies_2024", "a", "_", "x" * 47])
def test_valid_index_names(name: str) -> None:
    assert validate_index_name(name) is True


@pytest.mark.parametrize(
    "name",
    ["", None, "x" * 48, "my-index", "my index", "index!", "movies\n", "ünïcode"],
)
def test_invalid_index_names(name: str | None) -> None:
    assert validate_index_name(name) is False


# --- validate_ids() tests ---


def test_validate_ids_accepts_unique() -> None:
    validate_ids(["a", "b", "c"])


def test_validate_ids_reports_all_duplicates() -> None:
    """Every duplicated ID is reported, not just the first."""
    with pytest.raises(DuplicateIdError) as exc_info:
        validate_ids(["a", "b", "a", "c", "c"])

    assert set(exc_info.value.duplicates) == {"a", "c"}
    assert "a" in str(exc_info.value)
    assert "c" in str(exc_info.value)


def test_validate_ids_lists_each_duplicate_once() -> None:
    with pytest.raises(DuplicateIdError) as exc_info:
        validate_ids(["a", "a", "a"])

    assert exc_info.value.duplicates == ["a"]


def test_validate_ids_empty_before_duplicates() -> None:
    """An empty ID fails before duplicate detection."""
    with pytest.raises(EmptyIdError):
        validate_ids(["", "x"])


def test_validate_ids_rejects_none() -> None:
    with pytest.raises(EmptyIdError):
        validate_ids(["a", None])


# --- validate_batch_size() tests ---


def test_batch_size_limit() -> None:
    validate_batch_size(MAX_BATCH_SIZE)
    with pytest.raises(BatchSizeError, match="1000"):
        validate_batch_size(MAX_BATCH_SIZE + 1)


# --- validate_sparse_pair() tests ---


def test_sparse_pair_accepts_valid() -> None:
    validate_sparse_pair([0, 5, 9], [0.1, 0.2, 0.3], sparse_dimension=10)


def test_sparse_pair_rejects_length_mismatch() -> None:
    with pytest.raises(ValidationError, match="same length"):
        validate_sparse_pair([0, 1], [0.1], sparse_dimension=10)


@pytest.mark.parametrize("index", [-1, 10, 100])
def test_sparse_pair_rejects_out_of_range(index: int) -> None:
    with pytest.raises(ValidationError, match="out of bounds"):
        validate_sparse_pair([index], [0.5], sparse_dimension=10)


def test_sparse_pair_rejects_non_integer_index() -> None:
    with pytest.raises(ValidationError, match="not an integer"):
        validate_sparse_pair([1.5], [0.5], sparse_dimension=10)
