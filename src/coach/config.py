# src/coach/config.py

"""
Configuration loading from environment variables and coach.yml.

Priority: environment variables > coach.yml > defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional

import yaml

from coach.engine.ops import DEFAULT_MAX_ENTRY_BYTES

logger = logging.getLogger(__name__)

CONFIG_FILENAME: Final[str] = "coach.yml"


class ConfigError(Exception):
    """
    Raised when coach.yml exists but cannot be used.
    """


@dataclass
class CoachConfig:
    """Top-level coach configuration."""

    journal_dir: Path = field(default_factory=Path.cwd)
    max_entry_bytes: int = DEFAULT_MAX_ENTRY_BYTES
    editor: str = "vi"
    log_level: str = "WARNING"


def _candidates() -> list[Path]:
    return [Path.cwd() / CONFIG_FILENAME, Path.home() / ".coach" / CONFIG_FILENAME]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"{path}: cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: YAML root must be a mapping/dictionary")

    return data


def load_config(config_path: Optional[Path] = None) -> CoachConfig:
    """
    Load configuration from environment variables and an optional coach.yml.

    An explicit `config_path` must exist. Without it, the current directory
    and then ~/.coach/ are searched.
    """
    file_data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"{config_path}: config file not found")
        file_data = _read_yaml(config_path)
    else:
        for candidate in _candidates():
            if candidate.exists():
                file_data = _read_yaml(candidate)
                logger.debug("using config file %s", candidate)
                break

    journal_dir = os.getenv("COACH_DIR", file_data.get("journal_dir"))

    raw_max = os.getenv("COACH_MAX_ENTRY_BYTES", file_data.get("max_entry_bytes", DEFAULT_MAX_ENTRY_BYTES))
    try:
        max_entry_bytes = int(raw_max)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"max_entry_bytes must be an integer, got '{raw_max}'") from e

    editor = (
        os.getenv("COACH_EDITOR")
        or file_data.get("editor")
        or os.getenv("EDITOR")
        or "vi"
    )

    log_level = str(os.getenv("COACH_LOG_LEVEL", file_data.get("log_level", "WARNING"))).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got '{log_level}'")

    return CoachConfig(
        journal_dir=Path(journal_dir).expanduser() if journal_dir else Path.cwd(),
        max_entry_bytes=max_entry_bytes,
        editor=str(editor),
        log_level=log_level,
    )
