from __future__ import annotations

import os

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_endee_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ENDEE_* variables from the developer's shell out of Settings."""
    for name in list(os.environ):
        if name.startswith("ENDEE_"):
            monkeypatch.delenv(name)
