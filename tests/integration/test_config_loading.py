"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from vidsource.domain.entities.media import ContainerFormat, Resolution
from vidsource.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "vidsource-test",
        "environment": "test",
        "http": {
            "timeout_seconds": 15.0,
            "user_agent": "TestAgent/1.0",
        },
        "logging": {"level": "DEBUG", "format": "console"},
        "bilibili": {"token": "SESSDATA=yaml"},
        "quality": {"resolution": "uhd_4k", "container": "mp4"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI; pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "vidsource"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 30.0
        assert config.log_level == "INFO"
        assert config.log_format == "console"  # dev → console
        assert config.bilibili_token is None
        assert config.default_resolution is Resolution.FULL_HD
        assert config.default_container is ContainerFormat.DASH

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "vidsource-test"
        assert config.environment == "test"
        assert config.http_timeout_seconds == 15.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"
        assert config.bilibili_token == "SESSDATA=yaml"
        assert config.default_quality.resolution is Resolution.UHD_4K
        assert config.default_quality.container is ContainerFormat.MP4

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)

    def test_yaml_partial_override_preserves_defaults(
        self, tmp_path: Path
    ) -> None:
        """YAML that only sets http.timeout_seconds keeps other defaults."""
        config_data = {"http": {"timeout_seconds": 99.0}}
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.dump(config_data), encoding="utf-8")

        config = load_config(config_path=path)
        assert config.http_timeout_seconds == 99.0
        assert config.http_follow_redirects is True  # default preserved
        assert config.bilibili_referer == "https://www.bilibili.com"


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("VIDSOURCE_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("VIDSOURCE_BILIBILI_TOKEN", "SESSDATA=env")
        monkeypatch.setenv("VIDSOURCE_DEFAULT_RESOLUTION", "high")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.bilibili_token == "SESSDATA=env"
        assert config.default_resolution is Resolution.HIGH
        # YAML values not overridden by ENV stay
        assert config.app_name == "vidsource-test"

    def test_env_overrides_defaults(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("VIDSOURCE_ENVIRONMENT", "prod")

        config = load_config()
        assert config.environment == "prod"
        assert config.log_format == "json"  # prod → json

    def test_dotenv_file_feeds_env_layer(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Registers the key so teardown removes what load_dotenv sets
        monkeypatch.setenv("VIDSOURCE_HTTP_CONNECT_RETRIES", "0")
        monkeypatch.delenv("VIDSOURCE_HTTP_CONNECT_RETRIES")
        dotenv = tmp_path / ".env"
        dotenv.write_text("VIDSOURCE_HTTP_CONNECT_RETRIES=2\n", encoding="utf-8")

        config = load_config(dotenv_path=dotenv)
        assert config.http_connect_retries == 2

    def test_missing_dotenv_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("VIDSOURCE_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR", "default_container": "flv"},
        )
        assert config.log_level == "ERROR"
        assert config.default_container is ContainerFormat.FLV

    def test_cli_overrides_with_sectioned_format(
        self, yaml_config: Path
    ) -> None:
        config = load_config(
            config_path=yaml_config,
            cli_overrides={"http": {"timeout_seconds": 5.0}},
        )
        assert config.http_timeout_seconds == 5.0

    def test_invalid_resolution_rejected(self) -> None:
        with pytest.raises(ValueError):
            load_config(cli_overrides={"default_resolution": "8k"})

    def test_resolution_accepts_listed_quality_code(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("VIDSOURCE_DEFAULT_RESOLUTION", "80")
        config = load_config()
        assert config.default_resolution is Resolution.FULL_HD

    def test_resolution_rejects_unlisted_code(self) -> None:
        with pytest.raises(ValueError, match="unknown quality code: 5"):
            load_config(cli_overrides={"default_resolution": "5"})


class TestSectionedDump:
    def test_token_is_masked(self, yaml_config: Path) -> None:
        dumped = load_config(config_path=yaml_config).to_sectioned_dict()
        assert dumped["bilibili"]["token"] == "***"
        assert dumped["quality"] == {"resolution": "UHD_4K", "container": "mp4"}
