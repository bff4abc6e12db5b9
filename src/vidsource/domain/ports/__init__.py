from .video_source import VideoSourcePort

__all__ = ["VideoSourcePort"]
