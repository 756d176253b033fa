"""Persistent JSON config helpers.

Stores the default tries directory and the UI theme name. Malformed or
missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "trypick"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_TRIES_PATH = Path.home() / "src" / "tries"
TRY_PATH_ENV = "TRY_PATH"
LOG_PATH_ENV = "TRYPICK_LOG"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and ignored so a read-only config directory
    never breaks the picker.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        logger.debug("cannot write %s", CONFIG_PATH, exc_info=True)


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_string(key: str, value: str) -> None:
    stripped = str(value).strip()
    if not stripped:
        return
    config = load_config()
    config[key] = stripped
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")


def save_theme_name(theme_name: str) -> None:
    _save_string("theme", theme_name)


def load_tries_path() -> Path | None:
    value = _load_string("tries_path")
    return Path(value).expanduser() if value else None


def save_tries_path(path: Path) -> None:
    _save_string("tries_path", str(path))


def resolve_tries_path(explicit: str | None = None) -> Path:
    """Pick the tries directory: flag, then ``TRY_PATH``, then config, then default."""
    if explicit:
        candidate = Path(explicit).expanduser()
    elif os.environ.get(TRY_PATH_ENV):
        candidate = Path(os.environ[TRY_PATH_ENV]).expanduser()
    else:
        candidate = load_tries_path() or DEFAULT_TRIES_PATH
    return candidate.absolute()


def no_color_requested() -> bool:
    return bool(os.environ.get("NO_COLOR"))


def configure_logging() -> None:
    """Send debug logs to the file named by ``TRYPICK_LOG``, if set.

    The terminal is never used for logs: stderr carries the picker UI. An
    unwritable log path disables file logging instead of aborting.
    """
    log_path = os.environ.get(LOG_PATH_ENV)
    if not log_path:
        return
    try:
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root = logging.getLogger(APP_NAME)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
