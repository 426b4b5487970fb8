from __future__ import annotations

"""
Unit tests for Execution Settings Validation.

Focuses on:
1. Defaults for empty and invalid input.
2. Lenient coercion of strings and numbers.
3. Clamping and fallbacks for out-of-range values.
4. Strict mode raising instead of coercing.
5. Target path normalization (home shortcut, relative paths).
"""

import os

import pytest

from treeforge.core.execution.validator import MAX_WORKERS_LIMIT, validate_config
from treeforge.domain.config import get_default_config


def test_empty_dict_yields_defaults() -> None:
    """TC-01: Nothing supplied means defaults and no warnings."""
    merged, warnings = validate_config({})
    assert merged == get_default_config()
    assert warnings == []


def test_non_dict_input_falls_back() -> None:
    """TC-02: Wrong container type returns defaults with a warning."""
    merged, warnings = validate_config(["not", "a", "dict"])
    assert merged == get_default_config()
    assert len(warnings) == 1


def test_non_dict_input_strict_raises() -> None:
    with pytest.raises(TypeError):
        validate_config("nope", strict=True)


def test_lenient_coercion() -> None:
    """TC-03: Strings and numbers are converted with a warning each."""
    merged, warnings = validate_config({
        "dry_run": "on",
        "max_workers": "4",
        "timeout_seconds": "2.5",
        "serialize_style": " TREE ",
        "target_path": "  /tmp/x  ",
    })

    assert merged["dry_run"] is True
    assert merged["max_workers"] == 4
    assert merged["timeout_seconds"] == 2.5
    assert merged["serialize_style"] == "tree"
    assert merged["target_path"] == os.path.abspath("/tmp/x")
    assert len(warnings) == 3


@pytest.mark.parametrize("workers, expected", [(0, 1), (-3, 1), (1000, MAX_WORKERS_LIMIT), (8, 8)])
def test_workers_are_clamped(workers: int, expected: int) -> None:
    """TC-04: Worker counts outside the allowed range are clamped."""
    merged, _ = validate_config({"max_workers": workers})
    assert merged["max_workers"] == expected


def test_non_positive_timeout_uses_default() -> None:
    merged, warnings = validate_config({"timeout_seconds": 0})
    assert merged["timeout_seconds"] == get_default_config()["timeout_seconds"]
    assert warnings


def test_unknown_style_uses_default() -> None:
    merged, warnings = validate_config({"serialize_style": "xml"})
    assert merged["serialize_style"] == "indent"
    assert warnings


def test_invalid_types_fall_back() -> None:
    """TC-05: Uncoercible values keep the default."""
    merged, warnings = validate_config({"dry_run": "maybe", "max_workers": "many", "target_path": 42})

    assert merged["dry_run"] is False
    assert merged["max_workers"] == get_default_config()["max_workers"]
    assert merged["target_path"] == ""
    assert len(warnings) == 3


def test_target_path_is_normalized(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """TC-06: '~' and relative targets become absolute, like saved bookmarks."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))

    merged, _ = validate_config({"target_path": "~/proj"})
    assert merged["target_path"] == os.path.join(str(tmp_path), "proj")

    merged, _ = validate_config({"target_path": "out"})
    assert os.path.isabs(merged["target_path"])


def test_blank_target_path_stays_blank() -> None:
    merged, _ = validate_config({"target_path": "   "})
    assert merged["target_path"] == ""


def test_unknown_keys_are_preserved() -> None:
    merged, _ = validate_config({"custom": 1})
    assert merged["custom"] == 1


@pytest.mark.parametrize("config, error", [
    ({"dry_run": "yes"}, TypeError),
    ({"max_workers": "4"}, TypeError),
    ({"max_workers": 0}, ValueError),
    ({"timeout_seconds": -1}, ValueError),
    ({"serialize_style": "xml"}, ValueError),
])
def test_strict_mode_raises(config, error) -> None:
    """TC-06: Strict mode refuses anything that would need coercion."""
    with pytest.raises(error):
        validate_config(config, strict=True)
