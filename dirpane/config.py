"""Read-only JSON config helpers.

Supplies the highlight style, UI theme, color preference, and tree-pane
width. All access is defensive: malformed or missing config falls back to
defaults. Session state is never written back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .render import TWO_PANE_TREE_PERCENT
from .source import DEFAULT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "dirpane"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_style() -> str:
    """Return the configured Pygments style name, or the default style."""
    return _load_string("style") or DEFAULT_STYLE


def load_theme_name() -> str | None:
    """Load UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")


def load_color_enabled() -> bool:
    """Return whether colored output is enabled.

    Only explicit boolean values are accepted; anything else means ``True``.
    """
    value = load_config().get("color")
    return value if isinstance(value, bool) else True


def load_tree_percent() -> float:
    """Return the tree-pane share of the two-pane layout.

    Values outside the open interval (0, 100) and non-numbers fall back to
    the default split.
    """
    value = load_config().get("tree_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return TWO_PANE_TREE_PERCENT
    if value <= 0 or value >= 100:
        return TWO_PANE_TREE_PERCENT
    return float(value)
