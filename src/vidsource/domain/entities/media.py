"""Domain entities for video source resolution.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union


class Resolution(IntEnum):
    """Abstract resolution tiers (higher value = better quality)."""

    LOW = 1
    STANDARD = 2
    HIGH = 3
    HIGH_60FPS = 4
    FULL_HD = 5
    FULL_HD_PLUS = 6
    FULL_HD_60FPS = 7
    UHD_4K = 8


class ContainerFormat(str, Enum):
    """Container preference requested by the caller."""

    FLV = "flv"
    MP4 = "mp4"
    DASH = "dash"

    @property
    def is_legacy(self) -> bool:
        """Legacy containers are served as muxed single-track segments."""
        return self is not ContainerFormat.DASH


@dataclass(frozen=True)
class VideoId:
    """A single (possibly multi-part) video, keyed by its external id."""

    external_id: str


@dataclass(frozen=True)
class SeriesId:
    """A multi-episode series, keyed by its media id."""

    media_id: int


ResourceId = Union[VideoId, SeriesId]


@dataclass(frozen=True)
class QualityRequest:
    resolution: Resolution = Resolution.FULL_HD
    container: ContainerFormat = ContainerFormat.DASH


@dataclass(frozen=True)
class EpisodeDescriptor:
    """One playable unit of a resource, in remote playback order."""

    stream_key: str  # Platform stream key (e.g. Bilibili cid)
    part_index: int  # 1-based position within the resource
    title: str
    cover_url: str | None = None
    external_id: str | None = None  # Owning video id (single videos)
    episode_id: int | None = None  # Platform episode id (series)
    description: str | None = None  # Optional pass-through (series "evaluate")


@dataclass(frozen=True)
class StreamCandidate:
    """A separate-track candidate tagged with the resolution code it serves."""

    code: int
    url: str


@dataclass(frozen=True)
class SegmentedStream:
    """Legacy single-track response: ordered, already-muxed segment URLs."""

    urls: tuple[str, ...]


@dataclass(frozen=True)
class SeparateTrackStream:
    """Separate video/audio track response."""

    video: tuple[StreamCandidate, ...]
    audio: tuple[StreamCandidate, ...] = ()


StreamShape = Union[SegmentedStream, SeparateTrackStream]


@dataclass(frozen=True)
class ResolvedMedia:
    """Fully resolved, playable media for one episode.

    URLs are platform-signed and short-lived; never persist them.
    """

    title: str
    video_urls: tuple[str, ...]
    audio_urls: tuple[str, ...] = ()
    cover_url: str | None = None
    container: ContainerFormat = ContainerFormat.DASH
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.video_urls:
            raise ValueError("ResolvedMedia requires at least one video URL")
