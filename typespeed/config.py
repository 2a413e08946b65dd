"""User settings loaded from ``<data_dir>/config.yaml``."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from typespeed.core.passage import DURATIONS

logger = logging.getLogger(__name__)

HOME_ENV = "TYPESPEED_HOME"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_data_dir() -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".typespeed"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = field(default_factory=default_data_dir)
    default_duration: int = 30
    leaderboard_limit: int = 10
    log_level: str = "INFO"
    words_file: Optional[Path] = None

    @property
    def results_file(self) -> Path:
        return self.data_dir / "results.json"

    @property
    def identity_file(self) -> Path:
        return self.data_dir / "identity.json"


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from YAML, falling back to defaults for anything missing.

    ``TYPESPEED_HOME`` always wins over a ``data_dir`` given in the file.
    """
    data_dir = default_data_dir()
    config_path = Path(path) if path is not None else data_dir / "config.yaml"
    if not config_path.exists():
        return Settings(data_dir=data_dir)

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: expected a YAML mapping")

    if raw.get("data_dir") and not os.environ.get(HOME_ENV):
        data_dir = Path(str(raw["data_dir"])).expanduser()

    duration = int(raw.get("default_duration", 30))
    if duration not in DURATIONS:
        raise ValueError(f"{config_path.name}: default_duration must be one of {DURATIONS}")
    limit = int(raw.get("leaderboard_limit", 10))
    if limit < 1:
        raise ValueError(f"{config_path.name}: leaderboard_limit must be at least 1")
    level = str(raw.get("log_level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"{config_path.name}: unknown log_level {level!r}")
    words_file = raw.get("words_file")

    logger.debug("Loaded settings from %s", config_path)
    return Settings(
        data_dir=data_dir,
        default_duration=duration,
        leaderboard_limit=limit,
        log_level=level,
        words_file=Path(str(words_file)).expanduser() if words_file else None,
    )
