"""Settings file I/O for codepaint.

Manages a JSON settings file at XDG_CONFIG_HOME/codepaint/settings.json.
Values from the file are defaults; command-line flags override them.

Import as: import codepaint.settings
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import codepaint.styles

logger = logging.getLogger(__name__)

DEFAULTS = {
    "theme": "dark",
    "fallback_language": "python",
    "tab_width": 4,
    "width": None,
    "styles": {},
}


@dataclass(frozen=True)
class RenderConfig:
    """Resolved rendering configuration."""

    theme: str = "dark"
    fallback_language: str = "python"
    tab_width: int = 4
    width: Optional[int] = None  # None: detect from the terminal
    styles: dict = field(default_factory=dict)

    def style_table(self) -> codepaint.styles.StyleTable:
        table = codepaint.styles.get_style_table(self.theme)
        if self.styles:
            table = codepaint.styles.merge_overrides(table, self.styles)
        return table


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / codepaint / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "codepaint" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings).

    Only keys in DEFAULTS are accepted; anything else raises ValueError.
    """
    if key not in DEFAULTS:
        raise ValueError(
            "unknown setting {!r} (expected one of: {})".format(key, ", ".join(DEFAULTS))
        )
    data = load_settings()
    data[key] = value
    save_settings(data)


def parse_assignment(raw: str) -> tuple[str, object]:
    """Split ``KEY=VALUE`` from the command line.

    VALUE is read as JSON when it parses (numbers, null, objects), otherwise
    kept as a plain string: ``theme=light``, ``tab_width=2``, ``width=null``.
    """
    key, sep, value = raw.partition("=")
    key, value = key.strip(), value.strip()
    if not sep or not key:
        raise ValueError("expected KEY=VALUE, got {!r}".format(raw))
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def _as_text(key: str, value):
    if isinstance(value, str) and value:
        return value
    return _fallback(key, value)


def _as_positive_int(key: str, value):
    if isinstance(value, bool):
        return _fallback(key, value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        return _fallback(key, value)
    return number if number > 0 else _fallback(key, value)


def _as_styles(key: str, value):
    if isinstance(value, dict) and all(isinstance(v, dict) for v in value.values()):
        return dict(value)
    return _fallback(key, value)


def _fallback(key: str, value):
    logger.warning("ignoring invalid setting %s=%r, using %r", key, value, DEFAULTS[key])
    return DEFAULTS[key]


def load_render_config(overrides: Optional[dict] = None) -> RenderConfig:
    """Merge defaults, the settings file and ``overrides`` (None values skipped).

    A wrongly typed value is logged and replaced by its default, the same way
    an unreadable settings file counts as empty.
    """
    merged = dict(DEFAULTS)
    merged.update({k: v for k, v in load_settings().items() if k in DEFAULTS})
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    width = merged["width"]
    return RenderConfig(
        theme=_as_text("theme", merged["theme"]),
        fallback_language=_as_text("fallback_language", merged["fallback_language"]),
        tab_width=_as_positive_int("tab_width", merged["tab_width"]),
        width=_as_positive_int("width", width) if width is not None else None,
        styles=_as_styles("styles", merged["styles"]),
    )
