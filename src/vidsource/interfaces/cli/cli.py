from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path
from typing import Any, TextIO

import structlog

from vidsource.domain.entities.media import (
    ContainerFormat,
    QualityRequest,
    Resolution,
    ResolvedMedia,
)
from vidsource.domain.exceptions import (
    InvalidUrlError,
    NeedsAuthenticationError,
    VideoSourceError,
)
from vidsource.infrastructure.composition import build_registry, create_http_client
from vidsource.infrastructure.config import AppConfig, load_config
from vidsource.infrastructure.logging.setup import configure_logging
from vidsource.infrastructure.sources import VideoSourceRegistry

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_SOURCE_ERROR = 1
EXIT_INVALID_URL = 2
EXIT_NEEDS_AUTH = 3

_RESOLUTION_CHOICES = [tier.name.lower() for tier in Resolution]
_CONTAINER_CHOICES = [fmt.value for fmt in ContainerFormat]


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vidsource",
        description="Resolve a video page URL into playable stream URLs.",
    )
    parser.add_argument("url", nargs="?", help="Video or series page URL.")
    parser.add_argument(
        "--resolution",
        default=None,
        choices=_RESOLUTION_CHOICES,
        help="Resolution tier (overrides quality.resolution).",
    )
    parser.add_argument(
        "--container",
        default=None,
        choices=_CONTAINER_CHOICES,
        help="Container preference (overrides quality.container).",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Bilibili session cookie (overrides bilibili.token).",
    )
    parser.add_argument(
        "--dimensions",
        action="store_true",
        help="List supported resolution codes for the URL's source and exit.",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    args = parser.parse_args(argv)
    if not args.url and not args.dimensions:
        parser.error("url is required")
    return args


def _media_to_json(media: ResolvedMedia) -> str:
    data = asdict(media)
    data["container"] = media.container.value
    data["video_urls"] = list(media.video_urls)
    data["audio_urls"] = list(media.audio_urls)
    return json.dumps(data, ensure_ascii=False)


def _print_dimensions(
    registry: VideoSourceRegistry, url: str | None, out: TextIO
) -> int:
    if url:
        source = registry.dispatch(url)
        if source is None:
            raise InvalidUrlError(url)
        sources = [source]
    else:
        sources = [registry.get(name) for name in registry.supported_sources]
    for source in sources:
        if source is None:
            continue
        for code, label in source.dimension():
            print(f"{source.name}\t{code}\t{label}", file=out)
    return EXIT_OK


async def _run(
    config: AppConfig,
    url: str | None,
    quality: QualityRequest,
    *,
    dimensions: bool,
    out: TextIO,
) -> int:
    async with create_http_client(config) as http_client:
        registry = build_registry(config, http_client)
        try:
            if dimensions or url is None:
                return _print_dimensions(registry, url, out)

            count = 0
            async for media in registry.video_list(url, quality):
                print(_media_to_json(media), file=out, flush=True)
                count += 1
            log.info("resolve_finished", url=url, count=count)
            return EXIT_OK
        except InvalidUrlError as exc:
            log.error("resolve_invalid_url", url=exc.url)
            return EXIT_INVALID_URL
        except NeedsAuthenticationError as exc:
            log.error("resolve_needs_auth", source=exc.source, url=exc.url)
            return EXIT_NEEDS_AUTH
        except VideoSourceError as exc:
            log.error("resolve_failed", error=str(exc), error_type=type(exc).__name__)
            return EXIT_SOURCE_ERROR
        finally:
            await registry.cleanup()


def start(argv: Iterable[str] | None = None, out: TextIO | None = None) -> int:
    """Process entrypoint: load config once, then resolve and print."""
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if args.token:
        cli_overrides["bilibili_token"] = args.token
    if args.resolution:
        cli_overrides["default_resolution"] = args.resolution
    if args.container:
        cli_overrides["default_container"] = args.container

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )
    configure_logging(config)

    return asyncio.run(
        _run(
            config,
            args.url,
            config.default_quality,
            dimensions=args.dimensions,
            out=out or sys.stdout,
        )
    )


if __name__ == "__main__":
    raise SystemExit(start())
