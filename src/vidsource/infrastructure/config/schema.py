"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from vidsource.domain.entities.media import ContainerFormat, QualityRequest, Resolution
from vidsource.infrastructure.sources.bilibili.quality import dimension, tier_for_code

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _parse_resolution(value: Any) -> Any:
    """Accept tier names (``"full_hd"``) or the ``qn`` codes listed by ``--dimensions``."""
    if not isinstance(value, str):
        return value
    value = value.strip()
    if value.isdigit():
        tier = tier_for_code(int(value))
        if tier is None:
            known = ", ".join(str(code) for code, _ in dimension())
            raise ValueError(f"unknown quality code: {value} (expected one of {known})")
        return tier
    try:
        return Resolution[value.upper()]
    except KeyError:
        raise ValueError(f"unknown resolution tier: {value!r}") from None


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/bilibili/quality).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="vidsource", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for platform API calls.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="vidsource/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_connect_retries: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "http_connect_retries",
            AliasPath("http", "connect_retries"),
        ),
        description="Connection-level retries done by the httpx transport.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Bilibili (YAML section: bilibili.*)
    bilibili_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "bilibili_token",
            AliasPath("bilibili", "token"),
        ),
        description="Session cookie sent as the Cookie header (needed above 720P).",
    )
    bilibili_referer: str = Field(
        default="https://www.bilibili.com",
        validation_alias=AliasChoices(
            "bilibili_referer",
            AliasPath("bilibili", "referer"),
        ),
        description="Referer header for Bilibili API calls.",
    )

    # Default quality request (YAML section: quality.*)
    default_resolution: Resolution = Field(
        default=Resolution.FULL_HD,
        validation_alias=AliasChoices(
            "default_resolution",
            AliasPath("quality", "resolution"),
        ),
        description="Resolution tier name used when the caller does not pick one.",
    )
    default_container: ContainerFormat = Field(
        default=ContainerFormat.DASH,
        validation_alias=AliasChoices(
            "default_container",
            AliasPath("quality", "container"),
        ),
        description="Container preference (flv/mp4/dash).",
    )

    @field_validator("default_resolution", mode="before")
    @classmethod
    def _validate_resolution(cls, v: Any) -> Any:
        return _parse_resolution(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_connect_retries")
    @classmethod
    def _validate_connect_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_connect_retries must be >= 0")
        return v

    @field_validator("bilibili_token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    @property
    def default_quality(self) -> QualityRequest:
        return QualityRequest(
            resolution=self.default_resolution,
            container=self.default_container,
        )

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The token is masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
                "connect_retries": self.http_connect_retries,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "bilibili": {
                "token": "***" if self.bilibili_token else None,
                "referer": self.bilibili_referer,
            },
            "quality": {
                "resolution": self.default_resolution.name,
                "container": self.default_container.value,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read VIDSOURCE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - VIDSOURCE_HTTP_TIMEOUT_SECONDS
    - VIDSOURCE_LOG_LEVEL
    - VIDSOURCE_BILIBILI_TOKEN
    - VIDSOURCE_DEFAULT_RESOLUTION
    """

    model_config = SettingsConfigDict(
        env_prefix="VIDSOURCE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None
    http_connect_retries: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    bilibili_token: Optional[str] = None
    bilibili_referer: Optional[str] = None

    default_resolution: Optional[str] = None
    default_container: Optional[ContainerFormat] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
