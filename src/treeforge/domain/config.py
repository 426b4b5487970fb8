from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of application state, execution preferences and
saved target-path bookmarks using JSON. Supports default fallback when the
file is missing or corrupted.
"""

import json
import logging
import os
from typing import Any, Dict, List

from treeforge.domain import constants as const
from treeforge.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration (Session State).

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "target_path": "",
        "max_workers": const.DEFAULT_MAX_WORKERS,
        "timeout_seconds": const.DEFAULT_TIMEOUT_SECONDS,
        "serialize_style": "indent",
        "dry_run": False,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": const.CURRENT_CONFIG_VERSION,
        "app_settings": {
            "theme": "SystemDefault",
            "locale": "en",
        },
        "last_session": get_default_config(),
        "saved_paths": [],
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    default_state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            logger.warning("Corrupted config file. Resetting to defaults.")
            return default_state

        # Merge with defaults to ensure new keys exist
        state = default_state
        if isinstance(data.get("app_settings"), dict):
            state["app_settings"].update(data["app_settings"])
        if isinstance(data.get("last_session"), dict):
            state["last_session"].update(data["last_session"])
        if isinstance(data.get("saved_paths"), list):
            state["saved_paths"] = _dedupe_paths(data["saved_paths"])

        state["version"] = const.CURRENT_CONFIG_VERSION
        return state

    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = const.CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Retrieve the active configuration (Last Session) directly.
    """
    state = load_app_state()
    defaults = get_default_config()
    defaults.update(state.get("last_session", {}))
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """
    Save the provided config as the 'last_session'.
    """
    state = load_app_state()
    state["last_session"] = config
    save_app_state(state)


def get_saved_paths() -> List[str]:
    return list(load_app_state().get("saved_paths", []))


def add_saved_path(path: str) -> List[str]:
    """
    Bookmark a target path. Blank or already saved paths are ignored.

    Returns:
        List[str]: The updated bookmark list.
    """
    p = (path or "").strip()
    state = load_app_state()
    paths: List[str] = state.get("saved_paths", [])
    if p and p not in paths:
        paths.append(p)
        state["saved_paths"] = paths
        save_app_state(state)
    return list(paths)


def remove_saved_path(path: str) -> List[str]:
    """
    Drop a bookmarked target path.

    Returns:
        List[str]: The updated bookmark list.
    """
    state = load_app_state()
    paths = [p for p in state.get("saved_paths", []) if p != path]
    if len(paths) != len(state.get("saved_paths", [])):
        state["saved_paths"] = paths
        save_app_state(state)
    return paths


def _dedupe_paths(raw: List[Any]) -> List[str]:
    out: List[str] = []
    for item in raw:
        if isinstance(item, str) and item.strip() and item not in out:
            out.append(item)
    return out
