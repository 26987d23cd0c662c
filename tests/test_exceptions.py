"""Unit tests for the error taxonomy and status mapping."""

import pytest

from endee_client.exceptions import (
    CodecError,
    DimensionMismatchError,
    DuplicateIdError,
    EmptyIdError,
    EndeeApiError,
    EndeeError,
    InvalidKeyError,
    ValidationError,
    WireFormatError,
    raise_for_status,
)


@pytest.mark.parametrize(
    ("status", "prefix"),
    [
        (400, "Bad Request"),
        (401, "Unauthorized"),
        (403, "Forbidden"),
        (404, "Not Found"),
        (409, "Conflict"),
        (500, "Internal Server Error"),
        (503, "API Error (503)"),
    ],
)
def test_raise_for_status_maps_message(status: int, prefix: str) -> None:
    """Non-2xx statuses raise EndeeApiError with the body kept verbatim."""
    with pytest.raises(EndeeApiError) as exc_info:
        raise_for_status(status, '{"error": "boom"}')

    assert exc_info.value.status_code == status
    assert exc_info.value.error_body == '{"error": "boom"}'
    assert str(exc_info.value) == f'{prefix}: {{"error": "boom"}}'


@pytest.mark.parametrize("status", [200, 201, 204])
def test_raise_for_status_accepts_success(status: int) -> None:
    raise_for_status(status, "")


def test_validation_errors_are_value_errors() -> None:
    """Validation errors can be caught as ValueError and EndeeError."""
    for exc in (
        EmptyIdError(),
        DuplicateIdError(["a"]),
        DimensionMismatchError(3, 2),
    ):
        assert isinstance(exc, ValidationError)
        assert isinstance(exc, ValueError)
        assert isinstance(exc, EndeeError)


def test_invalid_key_error_is_codec_error() -> None:
    assert isinstance(InvalidKeyError(), CodecError)
    assert not isinstance(WireFormatError("x"), ValidationError)


def test_dimension_mismatch_message() -> None:
    exc = DimensionMismatchError(expected=3, actual=2)

    assert exc.expected == 3
    assert exc.actual == 2
    assert "expected 3, got 2" in str(exc)
