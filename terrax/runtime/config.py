"""Persistent JSON config helpers.

Settings come from ``./.terrax.json`` when present, otherwise from the user
config directory. All access is defensive: malformed or missing config and
invalid individual values fall back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..defaults import (
    DEFAULT_COMMANDS,
    DEFAULT_HISTORY_MAX_ENTRIES,
    DEFAULT_LOG_FORMAT,
    DEFAULT_MAX_NAVIGATION_COLUMNS,
    DEFAULT_ROOT_CONFIG_FILE,
    MIN_HISTORY_MAX_ENTRIES,
    MIN_MAX_NAVIGATION_COLUMNS,
)

logger = logging.getLogger(__name__)

APP_NAME = "terrax"
CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = ".terrax.json"
HISTORY_FILENAME = "history.log"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
CONFIG_PATH = CONFIG_DIR / CONFIG_FILENAME


@dataclass(frozen=True)
class TerragruntOptions:
    """Flags forwarded to every ``terragrunt run --all`` invocation."""

    parallelism: int = 0
    no_color: bool = False
    non_interactive: bool = False
    ignore_dependency_errors: bool = False
    ignore_external_dependencies: bool = False
    include_external_dependencies: bool = False
    extra_flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class TerraxSettings:
    commands: tuple[str, ...] = DEFAULT_COMMANDS
    max_navigation_columns: int = DEFAULT_MAX_NAVIGATION_COLUMNS
    history_max_entries: int = DEFAULT_HISTORY_MAX_ENTRIES
    root_config_file: str = DEFAULT_ROOT_CONFIG_FILE
    log_level: str = ""
    log_format: str = DEFAULT_LOG_FORMAT
    log_custom_format: str = ""
    terragrunt: TerragruntOptions = field(default_factory=TerragruntOptions)


def history_file_path() -> Path:
    return CONFIG_DIR / HISTORY_FILENAME


def config_path(cwd: Path | None = None) -> Path:
    """Return the project-local config when it exists, else the user config path."""
    local = (cwd if cwd is not None else Path.cwd()) / LOCAL_CONFIG_FILENAME
    if local.is_file():
        return local
    return CONFIG_PATH


def load_config(cwd: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    path = config_path(cwd)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level is not an object", path)
        return {}
    return data


def _coerce_int(value: object, default: int, minimum: int) -> int:
    # bool is an int subclass; JSON true/false are not counts.
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= minimum else default


def _coerce_str(value: object, default: str) -> str:
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _coerce_bool(value: object) -> bool:
    return value if isinstance(value, bool) else False


def _coerce_str_list(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())


def _terragrunt_options(value: object) -> TerragruntOptions:
    data = value if isinstance(value, dict) else {}
    return TerragruntOptions(
        parallelism=_coerce_int(data.get("parallelism"), 0, 0),
        no_color=_coerce_bool(data.get("no_color")),
        non_interactive=_coerce_bool(data.get("non_interactive")),
        ignore_dependency_errors=_coerce_bool(data.get("ignore_dependency_errors")),
        ignore_external_dependencies=_coerce_bool(data.get("ignore_external_dependencies")),
        include_external_dependencies=_coerce_bool(data.get("include_external_dependencies")),
        extra_flags=_coerce_str_list(data.get("extra_flags")),
    )


def settings_from_config(data: dict[str, object]) -> TerraxSettings:
    """Build settings from a decoded config object, replacing invalid values."""
    history = data.get("history")
    history_data = history if isinstance(history, dict) else {}
    commands = _coerce_str_list(data.get("commands")) or DEFAULT_COMMANDS
    return TerraxSettings(
        commands=commands,
        max_navigation_columns=_coerce_int(
            data.get("max_navigation_columns"),
            DEFAULT_MAX_NAVIGATION_COLUMNS,
            MIN_MAX_NAVIGATION_COLUMNS,
        ),
        history_max_entries=_coerce_int(
            history_data.get("max_entries"),
            DEFAULT_HISTORY_MAX_ENTRIES,
            MIN_HISTORY_MAX_ENTRIES,
        ),
        root_config_file=_coerce_str(data.get("root_config_file"), DEFAULT_ROOT_CONFIG_FILE),
        log_level=_coerce_str(data.get("log_level"), ""),
        log_format=_coerce_str(data.get("log_format"), DEFAULT_LOG_FORMAT),
        log_custom_format=_coerce_str(data.get("log_custom_format"), ""),
        terragrunt=_terragrunt_options(data.get("terragrunt")),
    )


def load_settings(cwd: Path | None = None) -> TerraxSettings:
    return settings_from_config(load_config(cwd))
