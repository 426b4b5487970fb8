from __future__ import annotations

"""
Unit tests for the Translation Catalog.

Ensures the shipped locale covers every key the interfaces use and that
dot-notation resolution, interpolation and fallbacks behave as expected.
"""

import json
from typing import Any, Dict, Set

import pytest

from treeforge.utils.i18n import I18n, i18n


def _get_flat_keys(d: Dict[str, Any], prefix: str = "") -> Set[str]:
    """Helper to flatten nested dictionary keys into dot-notation sets."""
    keys = set()
    for k, v in d.items():
        new_key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            keys.update(_get_flat_keys(v, new_key))
        else:
            keys.add(new_key)
    return keys


@pytest.fixture
def locale_dir(tmp_path) -> str:
    content = {
        "test": {
            "hello": "Hello {name}!",
            "simple": "Simple Text",
        }
    }
    (tmp_path / "xx.json").write_text(json.dumps(content), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{ nope", encoding="utf-8")
    return str(tmp_path)


def test_shipped_locale_is_loaded() -> None:
    """TC-01: The default catalog is English and available."""
    assert i18n.is_loaded
    assert "en" in i18n.available_locales()
    assert i18n.t("app.name") == "TreeForge"


@pytest.mark.parametrize("key", [
    "cli.errors.input_missing",
    "cli.errors.target_required",
    "cli.errors.empty_structure",
    "cli.status.summary",
    "gui.execution.result_ok",
    "gui.execution.result_fail",
    "gui.dialogs.crash",
])
def test_required_keys_present(key: str) -> None:
    """TC-02: Keys referenced by the interfaces resolve to text."""
    assert i18n.has(key)


def test_resolution_and_interpolation(locale_dir: str) -> None:
    """TC-03: Dotted keys resolve; keyword arguments are interpolated."""
    service = I18n("xx", locales_dir=locale_dir)

    assert service.locale == "xx"
    assert service.t("test.simple") == "Simple Text"
    assert service.t("test.hello", name="World") == "Hello World!"


def test_fallbacks_return_the_key(locale_dir: str) -> None:
    """TC-04: Missing keys, non-leaf keys and bad placeholders fall back to the key."""
    service = I18n("xx", locales_dir=locale_dir)

    assert service.t("missing.key") == "missing.key"
    assert service.t("test") == "test"
    assert service.t("test.hello", other="x") == "test.hello"
    assert not service.has("test")


def test_unknown_or_broken_locale(locale_dir: str) -> None:
    """TC-05: Unloadable locales report False and lookups degrade to keys."""
    service = I18n("xx", locales_dir=locale_dir)

    assert service.load_locale("zz") is False
    assert service.t("test.simple") == "test.simple"
    assert service.load_locale("broken") is False
    assert service.available_locales() == ["broken", "xx"]
