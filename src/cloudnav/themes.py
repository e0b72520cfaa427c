from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from textual.theme import Theme

logger = logging.getLogger("cloudnav")

# --- Theme Configuration ---
USER_THEMES_PATH = Path.home() / ".config/cloudnav/themes.json"

MODE_THEMES = {"light": "cloudnav-light", "dark": "cloudnav-dark"}

DEFAULT_THEMES: Dict[str, Dict[str, Any]] = {
    "cloudnav-light": {
        "primary": "#2563eb",
        "secondary": "#7c3aed",
        "accent": "#3b82f6",
        "foreground": "#0f172a",
        "background": "#f8fafc",
        "surface": "#ffffff",
        "panel": "#e2e8f0",
        "success": "#16a34a",
        "warning": "#f59e0b",
        "error": "#dc2626",
        "dark": False,
    },
    "cloudnav-dark": {
        "primary": "#60a5fa",
        "secondary": "#a78bfa",
        "accent": "#3b82f6",
        "foreground": "#f8fafc",
        "background": "#0f172a",
        "surface": "#1e293b",
        "panel": "#334155",
        "success": "#22c55e",
        "warning": "#f59e0b",
        "error": "#ef4444",
        "dark": True,
    },
}


def load_themes() -> Dict[str, Theme]:
    """
    Load the built-in light and dark themes, letting the user's themes file
    override colours for either of them.
    """
    definitions = {name: dict(values) for name, values in DEFAULT_THEMES.items()}

    if USER_THEMES_PATH.exists():
        try:
            with open(USER_THEMES_PATH, "r") as f:
                user_defs = json.load(f)
            for name, values in user_defs.items():
                if name in definitions and isinstance(values, dict):
                    definitions[name].update(values)
        except (IOError, json.JSONDecodeError, AttributeError) as e:
            logger.warning("Ignoring unreadable themes file %s: %s", USER_THEMES_PATH, e)

    return {name: Theme(name=name, **values) for name, values in definitions.items()}


def theme_name_for_mode(mode: str) -> str:
    return MODE_THEMES.get(mode, MODE_THEMES["light"])


def mode_for_theme_name(name: str) -> str:
    for mode, theme_name in MODE_THEMES.items():
        if theme_name == name:
            return mode
    return "light"
