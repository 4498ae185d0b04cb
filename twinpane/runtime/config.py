"""JSON config loading for viewer settings.

Stores the fold threshold, context kept around folds, and the Pygments style.
Malformed or missing config falls back to defaults, key by key.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..render.highlight import DEFAULT_STYLE
from ..session import DEFAULT_FOLD_THRESHOLD, DEFAULT_KEEP_CONTEXT

logger = logging.getLogger(__name__)

APP_NAME = "twinpane"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class ViewerConfig:
    fold_threshold: int = DEFAULT_FOLD_THRESHOLD
    keep_context: int = DEFAULT_KEEP_CONTEXT
    style: str = DEFAULT_STYLE


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

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


def _coerce_int(value: object, default: int, minimum: int) -> int:
    """Accept plain integers at or above ``minimum``; booleans and others use ``default``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= minimum else default


def load_viewer_config() -> ViewerConfig:
    """Load viewer settings, validating each key independently."""
    data = load_config()
    style = data.get("style")
    return ViewerConfig(
        fold_threshold=_coerce_int(data.get("fold_threshold"), DEFAULT_FOLD_THRESHOLD, 1),
        keep_context=_coerce_int(data.get("keep_context"), DEFAULT_KEEP_CONTEXT, 0),
        style=style.strip() if isinstance(style, str) and style.strip() else DEFAULT_STYLE,
    )
