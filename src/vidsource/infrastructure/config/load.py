from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import AliasChoices, AliasPath

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides


def _section_paths() -> dict[str, tuple[str, str]]:
    """Map each flat field name to its ``(section, key)`` YAML location.

    Read from the ``AliasPath`` entries declared on :class:`AppConfig`, so a
    new sectioned field needs no second registration here.
    """
    paths: dict[str, tuple[str, str]] = {}
    for name, field in AppConfig.model_fields.items():
        alias = field.validation_alias
        if not isinstance(alias, AliasChoices):
            continue
        for choice in alias.choices:
            if isinstance(choice, AliasPath) and len(choice.path) == 2:
                section, key = choice.path
                paths[name] = (str(section), str(key))
    return paths


_SECTION_PATHS = _section_paths()
_SECTIONS = frozenset(section for section, _ in _SECTION_PATHS.values())


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape.

    Sectioned blocks (``http: {...}``) and flat keys (``http_timeout_seconds``)
    may be mixed; flat keys win inside a layer.  Unknown keys are dropped.
    """
    out: dict[str, Any] = {
        section: dict(block)
        for section, block in layer.items()
        if section in _SECTIONS and isinstance(block, Mapping)
    }
    for key, value in layer.items():
        if key in _SECTION_PATHS:
            section, section_key = _SECTION_PATHS[key]
            out.setdefault(section, {})[section_key] = value
        elif key in AppConfig.model_fields and key not in _SECTIONS:
            out[key] = value
    return out


def _merged(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge sectioned layers left to right; later layers win per key."""
    result: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if isinstance(value, Mapping) and isinstance(result.get(key), dict):
                result[key] = {**result[key], **value}
            elif isinstance(value, Mapping):
                result[key] = dict(value)
            else:
                result[key] = value
    return result


def _yaml_layer(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars (incl. .env) < cli overrides

    No files or directories are created.
    """
    # .env only populates os.environ; EnvOverrides picks it up below.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers = [
        DEFAULT_CONFIG,
        _yaml_layer(config_path) if config_path is not None else {},
        EnvOverrides().to_update_dict(),
        cli_overrides or {},
    ]
    return AppConfig.model_validate(_merged(*(_sectioned(layer) for layer in layers)))
