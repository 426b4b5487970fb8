from __future__ import annotations

"""
Structure Tree Data Models.

Provides the immutable node types that make up an editable forest. A node is
either a FileNode (leaf, no children attribute at all) or a DirectoryNode
(always carries a possibly empty tuple of children), so the kind/children
invariant holds by construction rather than by runtime checks.
"""

import itertools
import secrets
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from treeforge.domain import constants as const

PATH_SEPARATOR = "/"

# -----------------------------------------------------------------------------
# KIND ENUMERATION
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"

# -----------------------------------------------------------------------------
# IDENTITY
# -----------------------------------------------------------------------------

class IdGenerator:
    """
    Explicit source of node identifiers.

    Each generator owns a random prefix and a monotonic counter, so ids never
    repeat within a generator and two generators never collide in practice.
    """

    def __init__(self, prefix: Optional[str] = None):
        self._prefix = prefix or secrets.token_hex(4)
        self._counter = itertools.count(1)

    @property
    def prefix(self) -> str:
        return self._prefix

    def next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"

    def __iter__(self) -> Iterator[str]:
        while True:
            yield self.next_id()

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileNode:
    """
    Leaf entry of the forest. Files never carry children.

    Attributes:
        id: Opaque identifier, unique across the forest.
        name: Display name without path separators.
        selected: Whether the node takes part in flattening and serialization.
        expanded: View state only.
        comment: Free-text annotation, round-trips through serialization.
        depth: Nesting level, roots are 0.
    """
    id: str
    name: str
    selected: bool = True
    expanded: bool = True
    comment: Optional[str] = None
    depth: int = 0

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE

    @property
    def is_directory(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryNode:
    """
    Container entry of the forest.

    Attributes:
        children: Ordered child nodes, each at depth + 1.
    """
    id: str
    name: str
    selected: bool = True
    expanded: bool = True
    comment: Optional[str] = None
    depth: int = 0
    children: Tuple["Node", ...] = field(default_factory=tuple)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.DIRECTORY

    @property
    def is_directory(self) -> bool:
        return True


Node = Union[FileNode, DirectoryNode]

# Ordered sequence of root nodes
Forest = Tuple[Node, ...]

_SHARED_FIELDS = tuple(f.name for f in fields(FileNode))

# -----------------------------------------------------------------------------
# CONSTRUCTION HELPERS
# -----------------------------------------------------------------------------

def validate_name(name: str) -> Optional[str]:
    """
    Check a candidate node name.

    Besides blank names and separators, this refuses text the structure
    syntax would read back differently: the comment marker, a trailing file
    marker and a leading tree connector.

    Returns:
        Optional[str]: Error description, or None when the name is usable.
    """
    if not name or not name.strip():
        return "Name cannot be empty."
    clean = name.strip()
    if PATH_SEPARATOR in clean:
        return f"Name cannot contain '{PATH_SEPARATOR}'."
    if const.COMMENT_MARKER in clean:
        return f"Name cannot contain '{const.COMMENT_MARKER}'."
    if clean.endswith(const.FILE_MARKER):
        return f"Name cannot end with '{const.FILE_MARKER}'."
    if _starts_with_connector(clean):
        return "Name cannot start with a tree connector."
    return None


def make_file(
        ids: IdGenerator,
        name: str,
        *,
        depth: int = 0,
        selected: bool = True,
        expanded: bool = True,
        comment: Optional[str] = None,
) -> FileNode:
    """Build a FileNode with a fresh id, rejecting invalid names."""
    error = validate_name(name)
    if error:
        raise ValueError(error)
    return FileNode(
        id=ids.next_id(),
        name=name.strip(),
        selected=selected,
        expanded=expanded,
        comment=comment,
        depth=depth,
    )


def make_directory(
        ids: IdGenerator,
        name: str,
        *,
        depth: int = 0,
        selected: bool = True,
        expanded: bool = True,
        comment: Optional[str] = None,
        children: Tuple[Node, ...] = (),
) -> DirectoryNode:
    """Build a DirectoryNode with a fresh id, rejecting invalid names."""
    error = validate_name(name)
    if error:
        raise ValueError(error)
    return DirectoryNode(
        id=ids.next_id(),
        name=name.strip(),
        selected=selected,
        expanded=expanded,
        comment=comment,
        depth=depth,
        children=tuple(children),
    )


def with_kind(node: Node, kind: NodeKind) -> Node:
    """
    Convert a node to the requested kind, keeping every shared field.

    File -> Directory allocates an empty children tuple.
    Directory -> File discards the children immediately.
    """
    if node.kind == kind:
        return node
    shared = {name: getattr(node, name) for name in _SHARED_FIELDS}
    if kind == NodeKind.DIRECTORY:
        return DirectoryNode(**shared, children=())
    return FileNode(**shared)


def with_children(node: DirectoryNode, children: Tuple[Node, ...]) -> DirectoryNode:
    return replace(node, children=tuple(children))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _starts_with_connector(name: str) -> bool:
    """Tell whether a name opens like a glyph prefix ('├x', '│ x', '|--x')."""
    head, tail = name[0], name[1:]
    if head in const.CONNECTOR_GLYPHS and head not in "+`":
        return True
    if head in const.VERTICAL_GLYPHS and (head != "|" or tail[:1].isspace()):
        return True
    return head in "|+`" and len(tail) >= 2 and all(ch in const.DASH_GLYPHS for ch in tail[:2])
