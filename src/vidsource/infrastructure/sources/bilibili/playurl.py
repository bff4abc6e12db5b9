"""Stream address resolution for Bilibili episodes.

Two endpoints, one per resource kind:

    GET /x/player/playurl?bvid=…&cid=…           → data    (videos)
    GET /pgc/player/web/playurl?cid=…&ep_id=…    → result  (series)

Either returns one of two shapes:

- ``durl``: legacy FLV/MP4 segments, already muxed (audio list empty).
- ``dash``: separate video and audio tracks, each tagged with the ``qn``
  code it serves.  The video track must match the requested ``qn``
  exactly; the first audio track is always used.
"""

from __future__ import annotations

import structlog
from pydantic import AliasChoices, BaseModel, Field

from vidsource.domain.entities.media import (
    EpisodeDescriptor,
    SegmentedStream,
    SeparateTrackStream,
    StreamCandidate,
    StreamShape,
)
from vidsource.domain.exceptions import NoSuchResourceError

from ..api_client import PlatformApiClient
from .episodes import API_BASE
from .quality import PlatformCodes

log = structlog.get_logger(__name__)

UGC_PLAYURL_URL = f"{API_BASE}/x/player/playurl"
PGC_PLAYURL_URL = f"{API_BASE}/pgc/player/web/playurl"


class DurlSegment(BaseModel):
    order: int = 0
    url: str


class DashTrack(BaseModel):
    id: int
    base_url: str = Field(validation_alias=AliasChoices("base_url", "baseUrl"))


class DashInfo(BaseModel):
    video: list[DashTrack] = Field(default_factory=list)
    audio: list[DashTrack] | None = None


class PlayUrl(BaseModel):
    quality: int | None = None
    durl: list[DurlSegment] | None = None
    dash: DashInfo | None = None


def stream_shape(play: PlayUrl) -> StreamShape | None:
    """Classify a stream-address payload, or None if neither shape is populated."""
    if play.durl:
        return SegmentedStream(urls=tuple(segment.url for segment in play.durl))
    if play.dash is not None and play.dash.video:
        return SeparateTrackStream(
            video=tuple(StreamCandidate(t.id, t.base_url) for t in play.dash.video),
            audio=tuple(
                StreamCandidate(t.id, t.base_url) for t in play.dash.audio or []
            ),
        )
    return None


def select_urls(
    shape: StreamShape | None, qn: int, context: str
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Pick concrete video and audio URLs from a stream shape."""
    if isinstance(shape, SegmentedStream):
        return shape.urls, ()

    if isinstance(shape, SeparateTrackStream):
        video = next((c.url for c in shape.video if c.code == qn), None)
        if video is None:
            log.warning(
                "bilibili_playurl_no_matching_video",
                context=context,
                qn=qn,
                offered=[c.code for c in shape.video],
            )
            raise NoSuchResourceError(f"{context} (qn={qn})")
        if not shape.audio:
            log.warning("bilibili_playurl_no_audio", context=context)
            raise NoSuchResourceError(f"{context} (audio)")
        return (video,), (shape.audio[0].url,)

    raise NoSuchResourceError(context)


def _endpoint(episode: EpisodeDescriptor) -> tuple[str, dict[str, str | int]]:
    params: dict[str, str | int] = {"cid": episode.stream_key}
    if episode.episode_id is not None:
        params["ep_id"] = episode.episode_id
        return PGC_PLAYURL_URL, params
    if episode.external_id is not None:
        params["bvid"] = episode.external_id
    return UGC_PLAYURL_URL, params


async def select_streams(
    api: PlatformApiClient,
    episode: EpisodeDescriptor,
    codes: PlatformCodes,
    *,
    requires_auth: bool = False,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Resolve one episode's stream key to ``(video_urls, audio_urls)``."""
    url, params = _endpoint(episode)
    params.update(codes.as_params())
    play = await api.fetch(url, PlayUrl, params=params, requires_auth=requires_auth)
    video, audio = select_urls(
        stream_shape(play), codes.qn, f"{url}?cid={episode.stream_key}"
    )
    log.debug(
        "bilibili_playurl_selected",
        cid=episode.stream_key,
        qn=codes.qn,
        videos=len(video),
        audios=len(audio),
    )
    return video, audio
