"""Persistent JSON config helpers.

Stores the visible-row count, UI theme, highlight style and log level.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "fjsf"
CONFIG_FILENAME = "config.json"
CONFIG_ENV = "FJSF_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_MAX_VISIBLE = 10
MAX_VISIBLE_LIMIT = 200


def _load_config_path() -> Path:
    """Return the config path, honouring the ``FJSF_CONFIG`` override."""
    override = os.environ.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _load_config_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_max_visible() -> int:
    """Return how many matches the full-screen list shows at once.

    Booleans, non-integers and out-of-range values fall back to the default.
    """
    value = load_config().get("max_visible")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_MAX_VISIBLE
    if value <= 0 or value > MAX_VISIBLE_LIMIT:
        return DEFAULT_MAX_VISIBLE
    return value


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")


def load_style_name() -> str | None:
    """Load the Pygments style used for command highlighting."""
    return _load_string("style")


def load_log_level() -> str | None:
    return _load_string("log_level")
