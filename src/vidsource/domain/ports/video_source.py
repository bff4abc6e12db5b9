"""Port for platform video sources."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from vidsource.domain.entities.media import QualityRequest, ResolvedMedia


@runtime_checkable
class VideoSourcePort(Protocol):
    """Resolves a platform web page URL to playable media streams.

    Implementations handle platform-specific URL recognition, credential
    handling and the API call sequence.
    """

    @property
    def name(self) -> str:
        """Registry key of the platform (e.g. 'bilibili')."""
        ...

    @property
    def pretty_name(self) -> str:
        """Human-readable platform name."""
        ...

    def valid(self, url: str) -> bool:
        """Return True if this source recognizes *url*. Never does I/O."""
        ...

    def dimension(self) -> list[tuple[int, str]]:
        """Supported resolution codes with labels, lowest to highest."""
        ...

    def set_token(self, token: str | None) -> None: ...

    def get_token(self) -> str | None: ...

    def video_list(
        self, url: str, quality: QualityRequest
    ) -> AsyncIterator[ResolvedMedia]:
        """Return a lazy sequence of resolved media for *url*.

        Raises ``InvalidUrlError`` or ``NeedsAuthenticationError`` eagerly;
        network failures surface while iterating.
        """
        ...
