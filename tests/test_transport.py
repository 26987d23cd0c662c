"""Unit tests for HttpTransport against a mocked httpx transport."""

import json
import logging

import httpx
import pytest

from endee_client.exceptions import EndeeApiError, TransportError
from endee_client.transport import HttpTransport

_BASE_URL = "http://endee.test/api/v1"


def _transport(handler, token: str | None = None) -> HttpTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(_BASE_URL, token=token, client=client)


@pytest.mark.anyio
async def test_get_returns_body_and_sends_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b'{"indexes": []}')

    async with _transport(handler, token="key:secret") as transport:
        body = await transport.get("/index/list", operation="Failed to list")

    assert body == b'{"indexes": []}'
    assert str(seen[0].url) == f"{_BASE_URL}/index/list"
    assert seen[0].headers["Authorization"] == "key:secret"


@pytest.mark.anyio
@pytest.mark.parametrize("token", [None, "", "   "])
async def test_blank_token_omits_authorization(token: str | None) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    async with _transport(handler, token=token) as transport:
        await transport.get("/index/list", operation="Failed to list")

    assert "Authorization" not in seen[0].headers


@pytest.mark.anyio
async def test_post_json_sets_content_type() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"ok")

    async with _transport(handler) as transport:
        await transport.post_json("/search", {"k": 3}, operation="Failed to query")

    request = seen[0]
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"k": 3}


@pytest.mark.anyio
async def test_post_msgpack_sends_raw_bytes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    async with _transport(handler) as transport:
        await transport.post_msgpack("/insert", b"\x90", operation="Failed to upsert")

    assert seen[0].headers["Content-Type"] == "application/msgpack"
    assert seen[0].content == b"\x90"


@pytest.mark.anyio
async def test_delete_with_and_without_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"deleted")

    async with _transport(handler) as transport:
        plain = await transport.delete("/a", operation="Failed to delete")
        with_body = await transport.delete(
            "/b", {"filter": []}, operation="Failed to delete"
        )

    assert plain == with_body == b"deleted"
    assert seen[0].method == seen[1].method == "DELETE"
    assert seen[0].content == b""
    assert json.loads(seen[1].content) == {"filter": []}


@pytest.mark.anyio
async def test_any_2xx_is_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async with _transport(handler) as transport:
        assert await transport.get("/x", operation="Failed") == b""


@pytest.mark.anyio
async def test_error_status_raises_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="index missing")

    async with _transport(handler) as transport:
        with caplog.at_level(logging.ERROR, logger="endee_client.transport"):
            with pytest.raises(EndeeApiError) as exc_info:
                await transport.get("/index/x/info", operation="Failed to get index")

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "Not Found: index missing"
    assert "Failed to get index" in caplog.text


@pytest.mark.anyio
async def test_network_failure_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _transport(handler) as transport:
        with pytest.raises(TransportError, match="Failed to list"):
            await transport.get("/index/list", operation="Failed to list")


def test_base_url_trailing_slash_stripped() -> None:
    transport = HttpTransport(f"{_BASE_URL}/")

    assert transport.base_url == _BASE_URL
