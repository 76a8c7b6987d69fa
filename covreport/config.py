"""Configuration loading for covreport (.covreport.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".covreport.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BadgeConfig:
    """Badge output settings."""

    path: Optional[str] = None
    red: Optional[float] = None
    yellow: Optional[float] = None


@dataclass
class CovReportConfig:
    """Represents the settings defined in .covreport.yml."""

    root: Path
    profile: Optional[str] = None
    base: Optional[str] = None
    src: Optional[str] = None
    output: Optional[str] = None
    ref: Optional[str] = None
    exclude: List[str] = field(default_factory=list)
    badge: BadgeConfig = field(default_factory=BadgeConfig)


def load_config(config_path: Path) -> CovReportConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CovReportConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    badge_data = _as_dict(data.get("badge"))
    thresholds = _as_dict(badge_data.get("thresholds"))
    badge = BadgeConfig(
        path=_as_str(badge_data.get("path")),
        red=_as_float(thresholds.get("red")),
        yellow=_as_float(thresholds.get("yellow")),
    )

    return CovReportConfig(
        root=root,
        profile=_as_str(data.get("profile")),
        base=_as_str(data.get("base")),
        src=_as_str(data.get("src")),
        output=_as_str(data.get("output")),
        ref=_as_str(data.get("ref")),
        exclude=_as_str_list(data.get("exclude")),
        badge=badge,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["BadgeConfig", "CONFIG_FILENAME", "ConfigError", "CovReportConfig", "load_config"]
