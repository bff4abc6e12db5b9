"""Platform video source implementations and their registry."""

from __future__ import annotations

from .registry import VideoSourceRegistry

__all__ = ["VideoSourceRegistry"]
