"""Async HTTP transport for the Endee REST API."""

from __future__ import annotations

import json
import logging
from types import TracebackType
from typing import Any

import httpx

from endee_client.exceptions import TransportError, raise_for_status

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
MSGPACK_CONTENT_TYPE = "application/msgpack"
DEFAULT_TIMEOUT_SECONDS = 30.0


class HttpTransport:
    """Sends JSON or MessagePack bodies and returns raw response bytes.

    Non-2xx responses are raised as EndeeApiError. Network failures are
    wrapped in TransportError; nothing is retried at this layer.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: API root, e.g. ``http://127.0.0.1:8080/api/v1``.
            token: Optional value for the Authorization header.
            timeout: Request timeout in seconds.
            client: Optional preconfigured httpx client (used by tests).
        """
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get(self, path: str, *, operation: str) -> bytes:
        return await self._send("GET", path, operation=operation)

    async def post_json(
        self, path: str, data: dict[str, Any], *, operation: str
    ) -> bytes:
        return await self._send(
            "POST",
            path,
            operation=operation,
            content=json.dumps(data).encode("utf-8"),
            content_type=JSON_CONTENT_TYPE,
        )

    async def post_msgpack(self, path: str, body: bytes, *, operation: str) -> bytes:
        return await self._send(
            "POST",
            path,
            operation=operation,
            content=body,
            content_type=MSGPACK_CONTENT_TYPE,
        )

    async def delete(
        self,
        path: str,
        data: dict[str, Any] | None = None,
        *,
        operation: str,
    ) -> bytes:
        if data is None:
            return await self._send("DELETE", path, operation=operation)
        return await self._send(
            "DELETE",
            path,
            operation=operation,
            content=json.dumps(data).encode("utf-8"),
            content_type=JSON_CONTENT_TYPE,
        )

    def _headers(self, content_type: str | None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if content_type is not None:
            headers["Content-Type"] = content_type
        if self._token and self._token.strip():
            headers["Authorization"] = self._token
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> bytes:
        """Issue a request and return the body of a successful response.

        Raises:
            EndeeApiError: If the service returns a non-2xx status.
            TransportError: If the request cannot be completed.
        """
        try:
            response = await self._client.request(
                method,
                f"{self._base_url}{path}",
                content=content,
                headers=self._headers(content_type),
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{operation}: {exc}") from exc

        if not response.is_success:
            body = response.text
            logger.error(
                "%s failed with status %d: %s", operation, response.status_code, body
            )
            raise_for_status(response.status_code, body)
        return response.content
