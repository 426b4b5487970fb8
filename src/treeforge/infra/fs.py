from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the injected filesystem capability used by the execution planner,
a read-only directory listing wrapper, and cross-platform path helpers.
Acts as an abstraction over the 'os' module so that the core only decides
what to create and in which order, never how the calls are made.
"""

import os
from typing import Optional, Protocol, Tuple, runtime_checkable

from treeforge.domain.listing_models import DirectoryEntry, DirectoryListing

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "TreeForge"
UNIX_APP_DIR_NAME = ".treeforge"


class DirectoryListingError(OSError):
    """Raised when a listing is requested for a missing path or a non-directory."""

# -----------------------------------------------------------------------------
# FILESYSTEM CAPABILITY
# -----------------------------------------------------------------------------

@runtime_checkable
class FileSystem(Protocol):
    """
    Capability consumed by the execution planner.

    Mutating calls report failures by raising OSError.
    """

    def exists(self, path: str) -> bool: ...

    def is_directory(self, path: str) -> bool: ...

    def create_directory_recursive(self, path: str) -> None: ...

    def create_empty_file(self, path: str) -> None: ...


class LocalFileSystem:
    """FileSystem implementation backed by the local disk."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path) and os.access(path, os.W_OK | os.X_OK)

    def create_directory_recursive(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def create_empty_file(self, path: str) -> None:
        # Truncates an existing file
        with open(path, "w", encoding="utf-8"):
            pass

# -----------------------------------------------------------------------------
# DIRECTORY LISTING API
# -----------------------------------------------------------------------------

def list_directory(path: str) -> DirectoryListing:
    """
    List the immediate children of a directory.

    Args:
        path: Directory to inspect.

    Returns:
        DirectoryListing: Sub-directories and files, sorted case-insensitively.

    Raises:
        DirectoryListingError: If the path is empty, missing or not a directory.
    """
    p = (path or "").strip()
    if not p:
        raise DirectoryListingError("Path parameter is required")
    if not os.path.exists(p):
        raise DirectoryListingError(f"Directory does not exist or is not accessible: {p}")
    if not os.path.isdir(p):
        raise DirectoryListingError(f"Path is not a directory: {p}")

    directories = []
    files = []
    try:
        with os.scandir(p) as it:
            for entry in it:
                item = DirectoryEntry(
                    path=os.path.join(p, entry.name),
                    name=entry.name,
                    is_directory=entry.is_dir(),
                )
                if item.is_directory:
                    directories.append(item)
                elif entry.is_file():
                    files.append(item)
    except OSError as e:
        raise DirectoryListingError(f"Directory could not be read: {e}") from e

    directories.sort(key=lambda d: d.name.lower())
    files.sort(key=lambda f: f.name.lower())
    return DirectoryListing(path=p, directories=directories, files=files)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/TreeForge
    - Linux/Mac: ~/.treeforge

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_inside(root: str, relative: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Join a slash-separated relative path onto a root, refusing escapes.

    Args:
        root: Target root directory.
        relative: Item path using '/' separators.

    Returns:
        Tuple[Optional[str], Optional[str]]: (Joined path, Error message if rejected).
    """
    rel = (relative or "").strip()
    if not rel:
        return None, "Item path is empty"
    if rel.startswith("/") or os.path.isabs(rel):
        return None, f"Item path must be relative: {rel}"
    parts = [part for part in rel.split("/") if part not in ("", ".")]
    if ".." in parts:
        return None, f"Item path contains '..' traversal: {rel}"
    if not parts:
        return os.path.normpath(root), None
    return os.path.join(root, *parts), None
