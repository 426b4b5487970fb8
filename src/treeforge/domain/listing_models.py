from __future__ import annotations

"""
Directory Listing Data Models.

Read-only snapshot of the immediate children of a real directory, used by
the interface layers to pick a target path.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class DirectoryEntry:
    path: str
    name: str
    is_directory: bool


@dataclass(frozen=True)
class DirectoryListing:
    """
    Immediate children of a directory, split by kind.

    Attributes:
        path: The listed directory.
        directories: Sub-directory entries.
        files: Regular file entries.
    """
    path: str
    directories: List[DirectoryEntry] = field(default_factory=list)
    files: List[DirectoryEntry] = field(default_factory=list)
