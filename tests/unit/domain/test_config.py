from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default state generation.
2. Resilience against missing and corrupted config files.
3. Save/Load of the last session without touching real user data.
4. Saved target-path bookmarks.
"""

import json
import os

from treeforge.domain.config import (
    add_saved_path,
    get_default_app_state,
    get_default_config,
    get_saved_paths,
    load_app_state,
    load_config,
    remove_saved_path,
    save_app_state,
    save_config,
)
from treeforge.domain.constants import CURRENT_CONFIG_VERSION


def test_default_state_shape() -> None:
    """TC-01: The default state carries settings, session and bookmarks."""
    state = get_default_app_state()

    assert state["version"] == CURRENT_CONFIG_VERSION
    assert state["last_session"] == get_default_config()
    assert state["saved_paths"] == []
    assert state["app_settings"]["locale"] == "en"


def test_missing_file_returns_defaults(isolated_config: str) -> None:
    assert not os.path.exists(isolated_config)
    assert load_app_state() == get_default_app_state()


def test_corrupted_file_returns_defaults(isolated_config: str) -> None:
    """TC-02: Malformed JSON falls back to defaults."""
    with open(isolated_config, "w", encoding="utf-8") as f:
        f.write("{ not json")

    assert load_app_state()["last_session"] == get_default_config()


def test_non_object_json_returns_defaults(isolated_config: str) -> None:
    with open(isolated_config, "w", encoding="utf-8") as f:
        json.dump([1, 2, 3], f)

    assert load_app_state() == get_default_app_state()


def test_partial_file_is_merged_with_defaults(isolated_config: str) -> None:
    """TC-03: Keys missing from disk come from the defaults."""
    with open(isolated_config, "w", encoding="utf-8") as f:
        json.dump({"last_session": {"target_path": "/srv"}, "saved_paths": ["/a", "/a", "", 7, "/b"]}, f)

    state = load_app_state()

    assert state["last_session"]["target_path"] == "/srv"
    assert state["last_session"]["max_workers"] == get_default_config()["max_workers"]
    assert state["saved_paths"] == ["/a", "/b"]


def test_save_and_load_config_round_trip(isolated_config: str) -> None:
    """TC-04: The last session survives a save/load cycle."""
    cfg = get_default_config()
    cfg.update({"target_path": "/projects", "dry_run": True, "max_workers": 4})

    save_config(cfg)

    assert load_config() == cfg
    with open(isolated_config, "r", encoding="utf-8") as f:
        assert json.load(f)["version"] == CURRENT_CONFIG_VERSION


def test_save_app_state_keeps_settings(isolated_config: str) -> None:
    state = get_default_app_state()
    state["app_settings"]["theme"] = "Dark"
    save_app_state(state)

    assert load_app_state()["app_settings"]["theme"] == "Dark"


def test_saved_paths_bookmarks(isolated_config: str) -> None:
    """TC-05: Bookmarks are deduplicated, blanks ignored, removal persisted."""
    assert get_saved_paths() == []

    add_saved_path("/one")
    add_saved_path("  ")
    assert add_saved_path("/one") == ["/one"]
    assert add_saved_path("/two") == ["/one", "/two"]

    assert remove_saved_path("/one") == ["/two"]
    assert get_saved_paths() == ["/two"]
    assert remove_saved_path("/missing") == ["/two"]
