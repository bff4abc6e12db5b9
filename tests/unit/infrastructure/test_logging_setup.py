"""Tests for structlog/stdlib logging setup."""

from __future__ import annotations

import logging

import structlog

from vidsource.infrastructure.config.schema import AppConfig
from vidsource.infrastructure.logging.setup import (
    build_logging_config,
    configure_logging,
)


def _renderer(cfg: dict) -> object:
    return cfg["formatters"]["structlog"]["processors"][-1]


class TestBuildLoggingConfig:
    def test_console_renderer_in_dev(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert isinstance(_renderer(cfg), structlog.dev.ConsoleRenderer)

    def test_json_renderer_in_prod(self) -> None:
        cfg = build_logging_config(AppConfig(environment="prod"))
        assert isinstance(_renderer(cfg), structlog.processors.JSONRenderer)

    def test_explicit_format_beats_environment(self) -> None:
        cfg = build_logging_config(AppConfig(environment="prod", log_format="console"))
        assert isinstance(_renderer(cfg), structlog.dev.ConsoleRenderer)

    def test_handler_writes_to_stderr(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert cfg["handlers"]["default"]["stream"] == "ext://sys.stderr"

    def test_root_level_follows_config(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="WARNING"))
        assert cfg["root"]["level"] == "WARNING"

    def test_http_loggers_quiet_by_default(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert cfg["loggers"]["httpx"]["level"] == "WARNING"
        assert cfg["loggers"]["httpcore"]["level"] == "WARNING"

    def test_http_loggers_verbose_in_debug(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="DEBUG"))
        assert cfg["loggers"]["httpx"]["level"] == "DEBUG"


class TestConfigureLogging:
    def test_applies_root_level(self) -> None:
        configure_logging(AppConfig(log_level="ERROR"))
        assert logging.getLogger().level == logging.ERROR

    def test_returns_applied_config(self) -> None:
        cfg = configure_logging(AppConfig(log_format="json"))
        assert cfg["version"] == 1
        assert isinstance(_renderer(cfg), structlog.processors.JSONRenderer)
