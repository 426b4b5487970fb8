from __future__ import annotations

"""
Forest Mutation Algebra.

Pure functions over immutable forests. Every operation returns a new forest
and never touches its input; untouched subtrees are shared between the old
and the new value. Targeted operations address nodes by id and are no-ops
when the id is unknown.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterator, Optional, Tuple, cast

from treeforge.domain import constants as const
from treeforge.domain.node_models import (
    DirectoryNode,
    FileNode,
    Forest,
    IdGenerator,
    Node,
    NodeKind,
    validate_name,
    with_children,
    with_kind,
)

logger = logging.getLogger(__name__)

NodeTransform = Callable[[Node], Node]

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeEdit:
    """
    Editable field set of a node, applied as a whole by edit_node.

    Attributes:
        name: New display name (trimmed before use).
        kind: Target kind; a change follows the retype rules.
        comment: New annotation; blank text clears it.
        selected: New inclusion flag.
    """
    name: str
    kind: NodeKind
    comment: Optional[str] = None
    selected: bool = True


@dataclass(frozen=True)
class TreeStats:
    total: int = 0
    selected: int = 0
    directories: int = 0
    files: int = 0

# -----------------------------------------------------------------------------
# QUERIES
# -----------------------------------------------------------------------------

def iter_nodes(forest: Forest) -> Iterator[Node]:
    """Yield every node in pre-order."""
    for node in forest:
        yield node
        if isinstance(node, DirectoryNode):
            yield from iter_nodes(node.children)


def find_node(forest: Forest, node_id: str) -> Optional[Node]:
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def count_nodes(forest: Forest) -> int:
    return sum(1 for _ in iter_nodes(forest))


def count_selected(forest: Forest) -> int:
    """Count nodes whose own flag is set, regardless of their ancestors."""
    return sum(1 for node in iter_nodes(forest) if node.selected)


def tree_stats(forest: Forest) -> TreeStats:
    """
    Summarize a forest for display.

    Returns:
        TreeStats: Total, selected, directory and file counts.
    """
    total = selected = directories = files = 0
    for node in iter_nodes(forest):
        total += 1
        if node.selected:
            selected += 1
        if node.kind == NodeKind.DIRECTORY:
            directories += 1
        else:
            files += 1
    return TreeStats(total=total, selected=selected, directories=directories, files=files)

# -----------------------------------------------------------------------------
# TARGETED MUTATIONS
# -----------------------------------------------------------------------------

def toggle_expanded(forest: Forest, node_id: str) -> Forest:
    return _update_node(forest, node_id, lambda n: replace(n, expanded=not n.expanded))


def set_selected(forest: Forest, node_id: str, value: bool) -> Forest:
    """Set the inclusion flag on exactly one node, without cascading."""
    return _update_node(forest, node_id, lambda n: replace(n, selected=bool(value)))


def retype(forest: Forest, node_id: str) -> Forest:
    """
    Flip a node between File and Directory.

    File -> Directory allocates empty children; Directory -> File discards
    the whole subtree immediately.
    """
    def flip(node: Node) -> Node:
        target = NodeKind.FILE if node.kind == NodeKind.DIRECTORY else NodeKind.DIRECTORY
        return with_kind(node, target)

    return _update_node(forest, node_id, flip)


def edit_node(forest: Forest, node_id: str, edit: NodeEdit) -> Tuple[Forest, Optional[str]]:
    """
    Replace the editable fields of a node.

    Args:
        forest: Current forest.
        node_id: Identity of the node to edit.
        edit: New name, kind, comment and selection.

    Returns:
        Tuple[Forest, Optional[str]]: (Resulting forest, Validation error).
            On error the input forest is returned unchanged.
    """
    error = validate_name(edit.name)
    if error is None and find_node(forest, node_id) is None:
        error = f"Node not found: {node_id}"
    if error:
        logger.debug(f"Edit rejected for node {node_id}: {error}")
        return forest, error

    # Comments live on one structure line
    comment = " ".join((edit.comment or "").split()) or None

    def apply(node: Node) -> Node:
        updated = replace(node, name=edit.name.strip(), comment=comment, selected=bool(edit.selected))
        return with_kind(updated, edit.kind)

    return _update_node(forest, node_id, apply), None


def add_root(forest: Forest, ids: Optional[IdGenerator] = None) -> Tuple[Forest, DirectoryNode]:
    """
    Append a new, empty root directory.

    Returns:
        Tuple[Forest, DirectoryNode]: (Resulting forest, The created node).
    """
    ids = ids or IdGenerator()
    node = DirectoryNode(id=ids.next_id(), name=const.DEFAULT_NODE_NAME, depth=0)
    return forest + (node,), node


def add_child(
        forest: Forest,
        parent_id: str,
        ids: Optional[IdGenerator] = None,
) -> Tuple[Forest, Optional[FileNode]]:
    """
    Append a new file under a node, promoting a file parent to a directory.

    Returns:
        Tuple[Forest, Optional[FileNode]]: (Resulting forest, The created node
            or None when the parent does not exist).
    """
    parent = find_node(forest, parent_id)
    if parent is None:
        return forest, None

    ids = ids or IdGenerator()
    child = FileNode(id=ids.next_id(), name=const.DEFAULT_NODE_NAME, depth=parent.depth + 1)

    def append(node: Node) -> Node:
        directory = cast(DirectoryNode, with_kind(node, NodeKind.DIRECTORY))
        return with_children(directory, directory.children + (child,))

    return _update_node(forest, parent_id, append), child


def delete_node(forest: Forest, node_id: str) -> Forest:
    """Remove a node and its entire subtree wherever it occurs."""
    changed = False
    out = []
    for node in forest:
        if node.id == node_id:
            changed = True
            continue
        if isinstance(node, DirectoryNode):
            children = delete_node(node.children, node_id)
            if children is not node.children:
                node = with_children(node, children)
                changed = True
        out.append(node)
    return tuple(out) if changed else forest

# -----------------------------------------------------------------------------
# CASCADES
# -----------------------------------------------------------------------------

def select_all(forest: Forest) -> Forest:
    return _map_all(forest, lambda n: replace(n, selected=True))


def deselect_all(forest: Forest) -> Forest:
    return _map_all(forest, lambda n: replace(n, selected=False))


def expand_all(forest: Forest) -> Forest:
    return _map_all(forest, lambda n: replace(n, expanded=True))


def collapse_all(forest: Forest) -> Forest:
    return _map_all(forest, lambda n: replace(n, expanded=False))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _update_node(forest: Forest, node_id: str, fn: NodeTransform) -> Forest:
    """
    Rebuild the path from the roots to one node, applying fn to it.

    Returns the very same forest object when the id is not found.
    """
    out = list(forest)
    for i, node in enumerate(forest):
        if node.id == node_id:
            out[i] = fn(node)
            return tuple(out)
        if isinstance(node, DirectoryNode):
            children = _update_node(node.children, node_id, fn)
            if children is not node.children:
                out[i] = with_children(node, children)
                return tuple(out)
    return forest


def _map_all(forest: Forest, fn: NodeTransform) -> Forest:
    """Apply fn to every node at every depth."""
    out = []
    for node in forest:
        updated = fn(node)
        if isinstance(updated, DirectoryNode):
            updated = with_children(updated, _map_all(updated.children, fn))
        out.append(updated)
    return tuple(out)
