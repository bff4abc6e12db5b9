"""Shared test fixtures for the vidsource test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from bilibili_payloads import FakeApi
from vidsource.domain.entities.media import ContainerFormat, QualityRequest, Resolution


@pytest.fixture()
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
async def fake_http_client(fake_api: FakeApi) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_api)) as client:
        yield client


@pytest.fixture()
def anonymous_quality() -> QualityRequest:
    return QualityRequest(resolution=Resolution.HIGH, container=ContainerFormat.DASH)


@pytest.fixture()
def login_quality() -> QualityRequest:
    return QualityRequest(resolution=Resolution.FULL_HD, container=ContainerFormat.DASH)
