"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "vidsource",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "vidsource/0.1.0",
        "connect_retries": 0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "bilibili": {
        "token": None,
        "referer": "https://www.bilibili.com",
    },
    "quality": {
        "resolution": "FULL_HD",
        "container": "dash",
    },
}
