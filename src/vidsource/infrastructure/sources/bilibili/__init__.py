"""Bilibili video source."""

from __future__ import annotations

from .source import BilibiliSource
from .urls import classify_url

__all__ = ["BilibiliSource", "classify_url"]
