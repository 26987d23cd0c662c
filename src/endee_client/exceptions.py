"""Exception hierarchy for the Endee client."""

from __future__ import annotations

_STATUS_PREFIXES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    500: "Internal Server Error",
}


class EndeeError(Exception):
    """Base class for every error raised by the client."""

    pass


class ValidationError(EndeeError, ValueError):
    """Input rejected before anything is sent to the service."""

    pass


class EmptyIdError(ValidationError):
    """A vector in the batch has an empty or missing ID."""

    def __init__(self) -> None:
        super().__init__("All vectors must have a non-empty ID")


class DuplicateIdError(ValidationError):
    """One or more IDs appear more than once in a batch."""

    def __init__(self, duplicates: list[str]) -> None:
        self.duplicates = duplicates
        super().__init__(f"Duplicate IDs found: {', '.join(duplicates)}")


class DimensionMismatchError(ValidationError):
    """A dense vector does not match the index dimension."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Vector dimension mismatch: expected {expected}, got {actual}"
        )


class BatchSizeError(ValidationError):
    """Too many vectors in a single write."""

    pass


class FilterError(ValidationError):
    """A filter expression is malformed."""

    pass


class WireFormatError(EndeeError):
    """A MessagePack payload does not match the expected tuple schema."""

    pass


class CodecError(EndeeError):
    """Metadata could not be compressed or encrypted."""

    pass


class InvalidKeyError(CodecError, ValueError):
    """The encryption key is not a 256-bit hex string."""

    def __init__(self) -> None:
        super().__init__("Key must be 256 bits (64 hex characters)")


class TransportError(EndeeError):
    """The HTTP request could not be completed."""

    pass


class EndeeApiError(EndeeError):
    """The service answered with a non-success status."""

    def __init__(self, message: str, status_code: int, error_body: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_body = error_body


def raise_for_status(status_code: int, error_body: str) -> None:
    """Raise EndeeApiError for any non-2xx status code.

    Args:
        status_code: HTTP status returned by the service.
        error_body: Raw response body, kept verbatim on the exception.

    Raises:
        EndeeApiError: If the status is outside the 2xx range.
    """
    if 200 <= status_code < 300:
        return
    prefix = _STATUS_PREFIXES.get(status_code, f"API Error ({status_code})")
    raise EndeeApiError(f"{prefix}: {error_body}", status_code, error_body)
