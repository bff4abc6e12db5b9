"""Episode listing for Bilibili videos and series.

Videos:  GET /x/player/pagelist?bvid=…            → data: [part, …]
Series:  GET /pgc/review/user?media_id=…          → result.media.season_id
         GET /pgc/view/web/season?season_id=…     → result.episodes
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import structlog
from pydantic import BaseModel, Field

from vidsource.domain.entities.media import (
    EpisodeDescriptor,
    ResourceId,
    SeriesId,
    VideoId,
)

from ..api_client import PlatformApiClient

log = structlog.get_logger(__name__)

API_BASE = "https://api.bilibili.com"
PAGELIST_URL = f"{API_BASE}/x/player/pagelist"
SEASON_LOOKUP_URL = f"{API_BASE}/pgc/review/user"
SEASON_VIEW_URL = f"{API_BASE}/pgc/view/web/season"


class PagePart(BaseModel):
    """One part of a (multi-part) video."""

    cid: int
    page: int
    part: str = ""
    duration: int = 0


class SeasonMedia(BaseModel):
    season_id: int
    title: str = ""


class SeasonLookup(BaseModel):
    media: SeasonMedia


class SeasonEpisode(BaseModel):
    id: int
    cid: int
    bvid: str | None = None
    cover: str | None = None
    title: str = ""
    long_title: str = ""


class SeasonView(BaseModel):
    title: str = ""
    evaluate: str | None = None
    episodes: list[SeasonEpisode] = Field(default_factory=list)


def compose_episode_title(long_title: str, title: str) -> str:
    """Join long and short episode titles, skipping empty parts."""
    return " ".join(part.strip() for part in (long_title, title) if part.strip())


async def _video_parts(
    api: PlatformApiClient, video: VideoId
) -> AsyncIterator[EpisodeDescriptor]:
    parts = await api.fetch(
        PAGELIST_URL, list[PagePart], params={"bvid": video.external_id}
    )
    log.debug("bilibili_parts_listed", bvid=video.external_id, count=len(parts))
    for part in parts:
        yield EpisodeDescriptor(
            stream_key=str(part.cid),
            part_index=part.page,
            title=part.part,
            external_id=video.external_id,
        )


async def _series_episodes(
    api: PlatformApiClient, series: SeriesId
) -> AsyncIterator[EpisodeDescriptor]:
    lookup = await api.fetch(
        SEASON_LOOKUP_URL, SeasonLookup, params={"media_id": series.media_id}
    )
    season_id = lookup.media.season_id
    view = await api.fetch(SEASON_VIEW_URL, SeasonView, params={"season_id": season_id})
    log.debug(
        "bilibili_episodes_listed",
        media_id=series.media_id,
        season_id=season_id,
        count=len(view.episodes),
    )
    for index, episode in enumerate(view.episodes, start=1):
        yield EpisodeDescriptor(
            stream_key=str(episode.cid),
            part_index=index,
            title=compose_episode_title(episode.long_title, episode.title),
            cover_url=episode.cover or None,
            episode_id=episode.id,
            description=view.evaluate or None,
        )


def iter_episodes(
    api: PlatformApiClient, resource: ResourceId
) -> AsyncIterator[EpisodeDescriptor]:
    """Lazily list the episodes of *resource* in remote playback order.

    Nothing is requested until the first element is awaited.
    """
    if isinstance(resource, VideoId):
        return _video_parts(api, resource)
    if isinstance(resource, SeriesId):
        return _series_episodes(api, resource)
    raise TypeError(f"unsupported resource id: {resource!r}")
