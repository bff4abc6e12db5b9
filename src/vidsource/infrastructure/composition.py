"""Composition root: builds the shared HTTP client and the source registry."""

from __future__ import annotations

import httpx
import structlog

from vidsource.infrastructure.config.schema import AppConfig
from vidsource.infrastructure.sources import VideoSourceRegistry
from vidsource.infrastructure.sources.bilibili import BilibiliSource

log = structlog.get_logger(__name__)


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient``.

    Connection retries are left to the httpx transport; the sources never
    retry on their own.
    """
    transport = httpx.AsyncHTTPTransport(retries=config.http_connect_retries)
    client = httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.debug("http_client_initialized", timeout=config.http_timeout_seconds)
    return client


def build_registry(
    config: AppConfig, http_client: httpx.AsyncClient
) -> VideoSourceRegistry:
    """Register every supported platform source, in dispatch order."""
    registry = VideoSourceRegistry(
        sources=[
            BilibiliSource(
                http_client,
                token=config.bilibili_token,
                referer=config.bilibili_referer,
            ),
        ]
    )
    log.info("video_sources_initialized", sources=registry.supported_sources)
    return registry
