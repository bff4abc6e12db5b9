"""Shared fixtures for integration tests.

These tests use the real composition (config, shared httpx client, registry)
with HTTP mocked via respx.
"""

from __future__ import annotations

import os

import pytest
import respx


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("VIDSOURCE_"):
            monkeypatch.delenv(key)


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
