"""Bilibili URL classification.

Recognized page URLs:
    https://www.bilibili.com/video/BV1xx411c7mD     → VideoId("BV1xx411c7mD")
    https://www.bilibili.com/bangumi/media/md28229233 → SeriesId(28229233)

Episode play links (``/bangumi/play/ep…``) are not supported.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from vidsource.domain.entities.media import ResourceId, SeriesId, VideoId

_HOSTS = frozenset({"bilibili.com", "www.bilibili.com"})

_VIDEO_SEGMENT = "video"
_SERIES_SEGMENT = "bangumi"
_MEDIA_SEGMENT = "media"

# BV ids: "BV" prefix followed by base58-ish alphanumerics
_BVID_RE = re.compile(r"^BV[0-9A-Za-z]+$")
_MEDIA_ID_RE = re.compile(r"^md(\d+)$", re.IGNORECASE)


def _path_segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def classify_url(url: str) -> ResourceId | None:
    """Classify a Bilibili page URL, or return None if it is not one."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https"):
        return None
    # urlparse lowercases hostname
    if (parsed.hostname or "") not in _HOSTS:
        return None

    segments = _path_segments(parsed.path)
    if len(segments) >= 2 and segments[0].lower() == _VIDEO_SEGMENT:
        token = segments[1]
        if _BVID_RE.match(token):
            return VideoId(token)
        return None

    if (
        len(segments) >= 3
        and segments[0].lower() == _SERIES_SEGMENT
        and segments[1].lower() == _MEDIA_SEGMENT
    ):
        match = _MEDIA_ID_RE.match(segments[2])
        if match:
            return SeriesId(int(match.group(1)))
    return None
