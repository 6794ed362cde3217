"""Load and merge configuration from .blamediff.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from blamediff.config.schema import (
    LOG_LEVELS,
    AnnotateConfig,
    BlameDiffConfig,
    LoggingConfig,
    SummaryConfig,
)

CONFIG_FILENAME = ".blamediff.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: BlameDiffConfig) -> None:
    for name in ("back_to", "inner", "old_prefixes"):
        value = getattr(cfg.annotate, name)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"annotate.{name} must be a list of strings")
    if cfg.summary.format is not None and not isinstance(cfg.summary.format, str):
        raise ConfigError("summary.format must be a string")
    if not isinstance(cfg.summary.color, bool):
        raise ConfigError("summary.color must be true or false")
    level = str(cfg.logging.level).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}")
    cfg.logging.level = level  # type: ignore[assignment]


def _merge_env_overrides(cfg: BlameDiffConfig) -> None:
    """Apply BLAMEDIFF_* environment variable overrides."""
    if val := os.environ.get("BLAMEDIFF_BACK_TO"):
        cfg.annotate.back_to = [r.strip() for r in val.split(",") if r.strip()]
    if val := os.environ.get("BLAMEDIFF_FORMAT"):
        cfg.summary.format = val
    if val := os.environ.get("BLAMEDIFF_LOG_LEVEL"):
        if val.upper() in LOG_LEVELS:
            cfg.logging.level = val.upper()  # type: ignore[assignment]


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> BlameDiffConfig:
    """Load, validate, and return a BlameDiffConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = BlameDiffConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = BlameDiffConfig(
            version=raw.get("version", "1.0"),
            annotate=_build_section(raw, AnnotateConfig, "annotate"),
            summary=_build_section(raw, SummaryConfig, "summary"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
