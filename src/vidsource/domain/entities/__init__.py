from .media import (
    ContainerFormat,
    EpisodeDescriptor,
    QualityRequest,
    Resolution,
    ResolvedMedia,
    ResourceId,
    SegmentedStream,
    SeparateTrackStream,
    SeriesId,
    StreamCandidate,
    StreamShape,
    VideoId,
)

__all__ = [
    "ContainerFormat",
    "EpisodeDescriptor",
    "QualityRequest",
    "Resolution",
    "ResolvedMedia",
    "ResourceId",
    "SegmentedStream",
    "SeparateTrackStream",
    "SeriesId",
    "StreamCandidate",
    "StreamShape",
    "VideoId",
]
