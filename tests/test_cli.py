from __future__ import annotations

import argparse
import json
import sys
from typing import Any

import pytest

from endee_client.cli import _parse_args, _run, main
from endee_client.config import Settings
from endee_client.exceptions import EndeeApiError
from endee_client.types import (
    IndexDescription,
    Precision,
    QueryOptions,
    QueryResult,
    SpaceType,
    VectorInfo,
)


class _DummyIndex:
    def __init__(self) -> None:
        self.last_options: QueryOptions | None = None

    async def query(self, options: QueryOptions) -> list[QueryResult]:
        self.last_options = options
        return [
            QueryResult(
                id="m1",
                similarity=0.9,
                distance=0.1,
                meta={"title": "Heat"},
                norm=1.0,
                filter={"genre": "crime"},
            )
        ]

    async def get_vector(self, vector_id: str) -> VectorInfo:
        return VectorInfo(id=vector_id, meta={}, norm=1.0, vector=[0.5, 0.5])

    def describe(self) -> IndexDescription:
        return IndexDescription(
            name="movies",
            space_type=SpaceType.COSINE,
            dimension=2,
            sparse_dimension=0,
            is_hybrid=False,
            count=3,
            precision=Precision.INT8D,
            m=16,
        )


class _DummyClient:
    index = _DummyIndex()
    created: list[Any] = []

    @classmethod
    def from_settings(cls, *_: Any, **__: Any) -> "_DummyClient":
        return cls()

    async def __aenter__(self) -> "_DummyClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        return None

    async def list_indexes(self) -> dict[str, Any]:
        return {"indexes": [{"name": "movies"}]}

    async def create_index(self, options: Any) -> str:
        self.created.append(options)
        return "Index created successfully"

    async def delete_index(self, name: str) -> str:
        return f"Index {name} deleted successfully"

    async def get_index(self, name: str) -> _DummyIndex:
        if name == "missing":
            raise EndeeApiError("Not Found: no such index", 404, "no such index")
        return self.index


@pytest.fixture(autouse=True)
def _patch_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("endee_client.cli.EndeeClient", _DummyClient)
    monkeypatch.setattr(
        "endee_client.cli._load_settings", lambda: Settings(_env_file=None)
    )


@pytest.mark.anyio
async def test_query_json(capsys: pytest.CaptureFixture) -> None:
    args = _parse_args(
        [
            "query",
            "--name",
            "movies",
            "--vector",
            "[0.1, 0.2]",
            "--top-k",
            "3",
            "--filter",
            '[{"genre": {"$eq": "crime"}}]',
            "--json",
        ]
    )

    result = await _run(args)
    assert result == 0

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload[0]["id"] == "m1"
    assert payload[0]["meta"] == {"title": "Heat"}

    options = _DummyClient.index.last_options
    assert options is not None
    assert options.vector == [0.1, 0.2]
    assert options.top_k == 3
    assert options.filter[0].field == "genre"


@pytest.mark.anyio
async def test_get_json(capsys: pytest.CaptureFixture) -> None:
    args = _parse_args(["get", "--name", "movies", "--id", "m7", "--json"])

    result = await _run(args)
    assert result == 0

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload == {
        "id": "m7",
        "norm": 1.0,
        "meta": {},
        "filter": {},
        "vector": [0.5, 0.5],
    }


@pytest.mark.anyio
async def test_create_builds_options() -> None:
    args = _parse_args(
        [
            "create",
            "--name",
            "docs",
            "--dim",
            "8",
            "--space-type",
            "l2",
            "--sparse-dim",
            "50",
        ]
    )

    result = await _run(args)
    assert result == 0

    options = _DummyClient.created[-1]
    assert options.name == "docs"
    assert options.space_type is SpaceType.L2
    assert options.sparse_dimension == 50


@pytest.mark.anyio
async def test_api_error_returns_nonzero(capsys: pytest.CaptureFixture) -> None:
    args = argparse.Namespace(command="describe", name="missing")

    result = await _run(args)
    assert result == 1
    assert "no such index" in capsys.readouterr().out


def test_main_dispatch(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fake_run(func, args):
        assert func.__name__ == "_run"
        assert args.command == "list"
        return 0

    monkeypatch.setattr("endee_client.cli.anyio.run", _fake_run)
    monkeypatch.setattr(sys, "argv", ["prog", "list"])
    assert main() == 0
