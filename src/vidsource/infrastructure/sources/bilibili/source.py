"""Bilibili video source.

Composes URL classification, the quality policy, episode listing and
stream selection behind :class:`VideoSourcePort`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import structlog

from vidsource.domain.entities.media import (
    QualityRequest,
    ResolvedMedia,
    ResourceId,
)
from vidsource.domain.exceptions import InvalidUrlError, NeedsAuthenticationError

from ..api_client import PlatformApiClient
from . import quality as policy
from .episodes import iter_episodes
from .playurl import select_streams
from .urls import classify_url

log = structlog.get_logger(__name__)

DEFAULT_REFERER = "https://www.bilibili.com"


class BilibiliSource:
    """Resolves bilibili.com video and series pages to stream URLs."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        token: str | None = None,
        referer: str = DEFAULT_REFERER,
    ) -> None:
        self._api = PlatformApiClient(
            http_client,
            source=self.name,
            credential_header="Cookie",
            headers={"Referer": referer},
            token=token,
        )

    @property
    def name(self) -> str:
        return "bilibili"

    @property
    def pretty_name(self) -> str:
        return "Bilibili"

    def set_token(self, token: str | None) -> None:
        self._api.token = token or None

    def get_token(self) -> str | None:
        return self._api.token

    def classify(self, url: str) -> ResourceId | None:
        return classify_url(url)

    def valid(self, url: str) -> bool:
        return classify_url(url) is not None

    def dimension(self) -> list[tuple[int, str]]:
        return policy.dimension()

    def video_list(
        self, url: str, quality: QualityRequest
    ) -> AsyncIterator[ResolvedMedia]:
        """Classify *url* and return a lazy sequence of resolved media.

        Classification and the credential check happen before any request
        is made; each episode's stream address is requested only when the
        caller pulls that element.
        """
        resource = classify_url(url)
        if resource is None:
            raise InvalidUrlError(url)

        requires_auth = policy.needs_auth(quality.resolution)
        if requires_auth and not self.get_token():
            log.info(
                "bilibili_login_required",
                url=url,
                resolution=quality.resolution.name,
            )
            raise NeedsAuthenticationError(self.name, url)

        log.info(
            "bilibili_resolve_started",
            url=url,
            resource=type(resource).__name__,
            resolution=quality.resolution.name,
            container=quality.container.value,
        )
        return self._resolve(resource, quality, requires_auth)

    async def _resolve(
        self,
        resource: ResourceId,
        quality: QualityRequest,
        requires_auth: bool,
    ) -> AsyncIterator[ResolvedMedia]:
        codes = policy.to_platform_codes(quality.resolution, quality.container)
        async for episode in iter_episodes(self._api, resource):
            video, audio = await select_streams(
                self._api, episode, codes, requires_auth=requires_auth
            )
            yield ResolvedMedia(
                title=episode.title,
                video_urls=video,
                audio_urls=audio,
                cover_url=episode.cover_url,
                container=quality.container,
                description=episode.description,
            )
