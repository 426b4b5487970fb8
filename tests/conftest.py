from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

1. Puts the 'src' directory on sys.path so 'treeforge' imports without
   installation.
2. Provides the sample structure text and an in-memory filesystem double
   that records every call made by the execution planner.
"""

import os
import sys
from typing import List, Set, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "gui: controller tests driven through mocked views")


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class RecordingFileSystem:
    """
    FileSystem double that records calls and fails on demand.

    Attributes:
        calls: (method, path) tuples in call order.
        fail_on: Paths whose creation raises OSError.
        target_exists: Answer of exists() for any path.
        target_is_dir: Answer of is_directory() for any path.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []
        self.fail_on: Set[str] = set()
        self.target_exists = True
        self.target_is_dir = True
        self.error_message = "Permission denied"

    def exists(self, path: str) -> bool:
        self.calls.append(("exists", path))
        return self.target_exists

    def is_directory(self, path: str) -> bool:
        self.calls.append(("is_directory", path))
        return self.target_is_dir

    def create_directory_recursive(self, path: str) -> None:
        self.calls.append(("mkdir", path))
        self._maybe_fail(path)

    def create_empty_file(self, path: str) -> None:
        self.calls.append(("touch", path))
        self._maybe_fail(path)

    def mutating_calls(self) -> List[Tuple[str, str]]:
        return [c for c in self.calls if c[0] in ("mkdir", "touch")]

    def _maybe_fail(self, path: str) -> None:
        if path in self.fail_on:
            raise PermissionError(13, self.error_message, path)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
SAMPLE_STRUCTURE = (
    "app/\n"
    "├── src/\n"
    "│   └── index.ts**\n"
    "└── README.md\n"
)


@pytest.fixture
def sample_structure() -> str:
    """Small structure mixing a directory, a marked file and an extension file."""
    return SAMPLE_STRUCTURE


@pytest.fixture
def recording_fs() -> RecordingFileSystem:
    return RecordingFileSystem()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch) -> str:
    """Redirect the persisted configuration file into a temporary directory."""
    config_file = str(tmp_path / "config.json")
    monkeypatch.setattr("treeforge.domain.config.CONFIG_FILE", config_file)
    return config_file
