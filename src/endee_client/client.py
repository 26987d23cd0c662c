"""Endee service client: token handling and index lifecycle."""

from __future__ import annotations

import json
import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as ModelValidationError

from endee_client.codec.metadata import MetadataCodec, key_checksum
from endee_client.config import DEFAULT_BASE_URL, Settings
from endee_client.exceptions import ValidationError, WireFormatError
from endee_client.transport import DEFAULT_TIMEOUT_SECONDS, HttpTransport
from endee_client.types import (
    CreateIndexOptions,
    IndexConfig,
    Precision,
    SpaceType,
)
from endee_client.vector.index import EndeeIndex
from endee_client.vector.validation import validate_index_name

logger = logging.getLogger(__name__)

MAX_DIMENSION = 10000


class IndexInfo(BaseModel):
    """Index metadata as returned by ``GET /index/{name}/info``."""

    model_config = ConfigDict(extra="ignore")

    space_type: str = SpaceType.COSINE.value
    dimension: int
    total_elements: int = 0
    precision: str = Precision.INT8D.value
    m: int = Field(default=16, alias="M")
    checksum: int = -1
    version: int | None = None
    sparse_dim: int | None = None

    def to_config(self, name: str) -> IndexConfig:
        """Convert to the read-only configuration used by index handles."""
        return IndexConfig(
            name=name,
            dimension=self.dimension,
            space_type=SpaceType.from_value(self.space_type),
            sparse_dimension=self.sparse_dim or 0,
            precision=Precision.from_value(self.precision),
            m=self.m,
            count=self.total_elements,
            checksum=self.checksum,
        )


def resolve_token(token: str | None, base_url: str) -> tuple[str | None, str]:
    """Split a ``key:secret:region`` token into header token and base URL.

    Tokens with fewer than three parts are used as-is with the given base URL.
    """
    if not token:
        return token, base_url
    parts = token.split(":")
    if len(parts) > 2:
        return f"{parts[0]}:{parts[1]}", f"https://{parts[2]}.endee.io/api/v1"
    return token, base_url


class EndeeClient:
    """Async client for the Endee vector database."""

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        encryption_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Optional API token; ``key:secret:region`` selects the
                hosted endpoint for that region.
            base_url: Explicit API root, overriding any token-derived URL.
            encryption_key: Optional 64-hex-char key for metadata encryption.
            timeout: Request timeout in seconds.
            http_client: Optional preconfigured httpx client (used by tests).
        """
        header_token, resolved_url = resolve_token(token, DEFAULT_BASE_URL)
        self._token = header_token
        self._encryption_key = encryption_key
        self._codec = MetadataCodec(encryption_key)
        self._transport = HttpTransport(
            base_url or resolved_url,
            token=header_token,
            timeout=timeout,
            client=http_client,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> EndeeClient:
        """Build a client from environment-driven settings."""
        base_url = settings.base_url if settings.base_url != DEFAULT_BASE_URL else None
        return cls(
            settings.token,
            base_url=base_url,
            encryption_key=settings.encryption_key,
            timeout=settings.timeout_seconds,
            http_client=http_client,
        )

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    async def __aenter__(self) -> EndeeClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared HTTP connection pool."""
        await self._transport.aclose()

    async def create_index(self, options: CreateIndexOptions) -> str:
        """Create an index.

        Raises:
            ValidationError: If the name, dimension or sparse dimension is
                invalid.
        """
        if not validate_index_name(options.name):
            raise ValidationError(
                "Invalid index name. Index name must be alphanumeric and can "
                "contain underscores and less than 48 characters"
            )
        if options.dimension > MAX_DIMENSION:
            raise ValidationError(f"Dimension cannot be greater than {MAX_DIMENSION}")
        if options.sparse_dimension is not None and options.sparse_dimension < 0:
            raise ValidationError("Sparse dimension cannot be less than 0")

        data: dict[str, Any] = {
            "index_name": options.name,
            "dim": options.dimension,
            "space_type": options.space_type.value,
            "M": options.m,
            "ef_con": options.ef_con,
            "checksum": key_checksum(self._encryption_key),
            "precision": options.precision.value,
        }
        if options.sparse_dimension is not None:
            data["sparse_dim"] = options.sparse_dimension
        if options.version is not None:
            data["version"] = options.version

        await self._transport.post_json(
            "/index/create", data, operation="Failed to create index"
        )
        return "Index created successfully"

    async def list_indexes(self) -> Any:
        """Return the decoded index listing."""
        body = await self._transport.get(
            "/index/list", operation="Failed to list indexes"
        )
        try:
            return json.loads(body)
        except ValueError as exc:
            raise WireFormatError(f"Index listing is not valid JSON: {exc}") from exc

    async def delete_index(self, name: str) -> str:
        """Delete an index by name."""
        await self._transport.delete(
            f"/index/{quote(name, safe='')}/delete",
            operation="Failed to delete index",
        )
        return f"Index {name} deleted successfully"

    async def get_index(self, name: str) -> EndeeIndex:
        """Fetch index configuration and return a handle bound to it."""
        body = await self._transport.get(
            f"/index/{quote(name, safe='')}/info", operation="Failed to get index"
        )
        try:
            info = IndexInfo.model_validate_json(body)
        except ModelValidationError as exc:
            raise WireFormatError(f"Unexpected index info payload: {exc}") from exc

        config = info.to_config(name)
        expected = key_checksum(self._encryption_key)
        if config.checksum != expected:
            logger.warning(
                "Index %s checksum %d does not match the configured key (%d); "
                "metadata may not decode",
                name,
                config.checksum,
                expected,
            )
        return EndeeIndex(self._transport, config, self._codec)
