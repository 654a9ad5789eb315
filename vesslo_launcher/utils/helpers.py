"""
Helper utilities for the Vesslo launcher.

Provides common functions used by the palette and handlers:
- Settings loading
- Router assembly from settings
- Launcher window management
"""

import copy
import json
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

SETTINGS_PATH = Path(__file__).parent.parent / "data" / "settings.toml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "vesslo": {
        "data_path": "~/.vesslo/data.json",
        "stale_after_hours": 24,
    },
    "search": {
        "max_results": 200,
        "fuzzy_threshold": 60,
    },
    "prefixes": {
        "tags": "#",
        "updates": "u:",
        "brew": "brew:",
    },
    "updates": {
        "default_sort": "source",
    },
    "homebrew": {
        "brew_path": "brew",
        "timeout_seconds": 900,
    },
    "panel": {
        "width": 640,
        "height": 720,
    },
}


def get_focused_monitor() -> int:
    """
    Get the ID of the currently focused monitor in Hyprland.

    Returns:
        Monitor ID (int), defaults to 0 if detection fails
    """
    try:
        result = subprocess.run(
            ['hyprctl', 'monitors', '-j'],
            capture_output=True,
            text=True,
            timeout=1
        )
        if result.returncode == 0:
            for monitor in json.loads(result.stdout):
                if monitor.get('focused', False):
                    return monitor['id']
    except (OSError, subprocess.TimeoutExpired, json.JSONDecodeError):
        logger.debug("hyprctl unavailable, using monitor 0")

    return 0


def close_launcher():
    """
    Close the Vesslo palette.

    Hides all windows with namespace starting with "vesslo-".
    """
    from ignis.app import IgnisApp

    app = IgnisApp.get_default()

    for window in app.get_windows():
        if window.namespace and window.namespace.startswith("vesslo-"):
            window.set_visible(False)


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load launcher settings from TOML file.

    Args:
        settings_path: Override for data/settings.toml

    Returns:
        Dictionary containing settings with defaults applied

    Example settings.toml:
        [vesslo]
        data_path = "~/.vesslo/data.json"
        stale_after_hours = 24

        [prefixes]
        tags = "#"
        updates = "u:"
        brew = "brew:"

        [updates]
        default_sort = "name"
    """
    path = Path(settings_path) if settings_path else SETTINGS_PATH

    if not path.exists():
        logger.debug(f"Settings file not found at {path}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        loaded = toml.load(path)
    except (OSError, toml.TomlDecodeError):
        logger.exception(f"Could not load settings from {path}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    return _deep_merge(copy.deepcopy(DEFAULT_SETTINGS), loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def build_router(store, settings: Optional[Dict[str, Any]] = None, items=None):
    """
    Create a QueryRouter with every Vesslo handler registered.

    Args:
        store: VessloDataStore (or anything with .loaded and .apps)
        settings: Settings dict, loaded from disk when omitted
        items: ItemFactory override (tests pass a synchronous one)

    Returns:
        QueryRouter
    """
    from vesslo_launcher.search.handlers import (
        AppSearchHandler,
        BulkHomebrewHandler,
        ItemFactory,
        TagBrowseHandler,
        UpdatesHandler,
    )
    from vesslo_launcher.search.router import QueryRouter

    settings = settings or load_settings()
    prefixes = settings["prefixes"]

    if items is None:
        items = ItemFactory(
            brew_path=settings["homebrew"]["brew_path"],
            brew_timeout=settings["homebrew"]["timeout_seconds"],
        )

    router = QueryRouter()
    router.register(BulkHomebrewHandler(store, items, prefix=prefixes["brew"]))
    router.register(UpdatesHandler(
        store, items,
        prefix=prefixes["updates"],
        default_sort=settings["updates"]["default_sort"],
    ))
    router.register(TagBrowseHandler(
        store, items,
        prefix=prefixes["tags"],
        fuzzy_threshold=settings["search"]["fuzzy_threshold"],
    ))
    router.register(AppSearchHandler(store, items, max_results=settings["search"]["max_results"]))
    return router
