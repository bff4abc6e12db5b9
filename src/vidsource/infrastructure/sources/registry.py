"""Registry that dispatches page URLs to per-platform video sources."""

from __future__ import annotations

from collections.abc import AsyncIterator

import structlog

from vidsource.domain.entities.media import QualityRequest, ResolvedMedia
from vidsource.domain.exceptions import InvalidUrlError
from vidsource.domain.ports.video_source import VideoSourcePort

log = structlog.get_logger(__name__)


class VideoSourceRegistry:
    """Holds platform sources and picks the first that recognizes a URL.

    Sources are tried in registration order.  Recognition is a pure
    predicate, so :meth:`dispatch` has no side effects.
    """

    def __init__(self, sources: list[VideoSourcePort] | None = None) -> None:
        self._sources: dict[str, VideoSourcePort] = {}
        for source in sources or []:
            self.register(source)

    def register(self, source: VideoSourcePort) -> None:
        """Register a source; re-registering a name replaces it in place."""
        self._sources[source.name] = source
        log.debug("video_source_registered", source=source.name)

    @property
    def supported_sources(self) -> list[str]:
        """Return registered source names in dispatch order."""
        return list(self._sources.keys())

    def get(self, name: str) -> VideoSourcePort | None:
        return self._sources.get(name)

    def dispatch(self, url: str) -> VideoSourcePort | None:
        """Return the first registered source that recognizes *url*."""
        for source in self._sources.values():
            if source.valid(url):
                return source
        return None

    def video_list(
        self, url: str, quality: QualityRequest
    ) -> AsyncIterator[ResolvedMedia]:
        """Dispatch *url* and return the matching source's media sequence."""
        source = self.dispatch(url)
        if source is None:
            log.info("video_source_not_found", url=url)
            raise InvalidUrlError(url)
        log.debug("video_source_dispatched", source=source.name, url=url)
        return source.video_list(url, quality)

    async def cleanup(self) -> None:
        """Close resources held by sources that have a cleanup method."""
        for source in self._sources.values():
            cleanup_fn = getattr(source, "cleanup", None)
            if cleanup_fn is not None:
                await cleanup_fn()
