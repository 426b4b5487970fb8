from __future__ import annotations

"""
Directory Structure Parser.

Turns a pasted textual rendering of a directory structure (tree glyphs or
plain indentation) into an ordered forest of immutable nodes. Parsing is
total: any string yields a forest, malformed lines degrade into root-level
guesses instead of errors.
"""

import logging
from typing import Dict, List, Optional, Tuple

from treeforge.core.parsing.line_analyzer import STRATEGY_GLYPH, LineInfo, analyze_line
from treeforge.domain.node_models import (
    DirectoryNode,
    FileNode,
    Forest,
    IdGenerator,
    Node,
    NodeKind,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_structure(text: str, ids: Optional[IdGenerator] = None) -> Forest:
    """
    Parse structure text into a forest.

    The first meaningful line is the implicit root (always a directory).
    Every later line attaches as the last child of the most recently seen
    node one level shallower; when no such node exists it starts a new root.

    Args:
        text: Raw structure text, newline delimited.
        ids: Identifier source for the created nodes.

    Returns:
        Forest: Ordered root nodes. Empty for blank input.
    """
    ids = ids or IdGenerator()
    infos = [info for info in (analyze_line(line) for line in _prepare_lines(text or "")) if info]
    if not infos:
        return ()

    glyph_base = min(
        (info.units for info in infos[1:] if info.strategy == STRATEGY_GLYPH),
        default=0,
    )

    roots: List[_Draft] = []
    latest_at_depth: Dict[int, _Draft] = {}

    root_info = infos[0]
    root = _attach_chain(roots, 0, root_info, ids, force_kind=NodeKind.DIRECTORY)
    latest_at_depth[0] = root

    for info in infos[1:]:
        depth = _line_depth(info, glyph_base)
        parent = latest_at_depth.get(depth - 1) if depth > 0 else None

        if parent is None:
            if depth > 0:
                logger.debug(f"Parser: no parent at depth {depth - 1} for '{info.name}', promoted to root.")
            node = _attach_chain(roots, 0, info, ids)
        else:
            if parent.kind == NodeKind.FILE:
                logger.debug(f"Parser: file '{parent.name}' promoted to directory to hold '{info.name}'.")
                parent.kind = NodeKind.DIRECTORY
            node = _attach_chain(parent.children, parent.depth + 1, info, ids)

        latest_at_depth[depth] = node

    forest = tuple(_freeze(d) for d in roots)
    logger.debug(f"Parser: {len(infos)} line(s) parsed into {len(forest)} root(s).")
    return forest

# -----------------------------------------------------------------------------
# INTERNAL BUILD STRUCTURE
# -----------------------------------------------------------------------------

class _Draft:
    """Mutable node used while a forest is being assembled."""

    __slots__ = ("id", "name", "kind", "comment", "depth", "children")

    def __init__(self, node_id: str, name: str, kind: NodeKind, depth: int, comment: Optional[str] = None):
        self.id = node_id
        self.name = name
        self.kind = kind
        self.comment = comment
        self.depth = depth
        self.children: List[_Draft] = []


def _prepare_lines(text: str) -> List[str]:
    """Split into non-blank lines and remove indentation common to all of them."""
    lines = [line.rstrip() for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    common = min(len(line) - len(line.lstrip(" \t")) for line in lines)
    if common:
        prefixes = {line[:common] for line in lines}
        # Only strip when every line shares the exact same whitespace prefix
        if len(prefixes) == 1:
            lines = [line[common:] for line in lines]
    return lines


def _line_depth(info: LineInfo, glyph_base: int) -> int:
    if info.strategy == STRATEGY_GLYPH:
        return max(info.units - glyph_base, 0) + 1
    return info.units


def _attach_chain(
        container: List[_Draft],
        depth: int,
        info: LineInfo,
        ids: IdGenerator,
        force_kind: Optional[NodeKind] = None,
) -> _Draft:
    """
    Append the line's node into a container, expanding interior path segments.

    Intermediate segments reuse the last same-named directory already present
    in the container, or create one.

    Returns:
        _Draft: The node created for the last segment.
    """
    for segment in info.segments[:-1]:
        existing = _find_directory(container, segment)
        if existing is None:
            existing = _Draft(ids.next_id(), segment, NodeKind.DIRECTORY, depth)
            container.append(existing)
        container = existing.children
        depth += 1

    leaf = _Draft(ids.next_id(), info.segments[-1], force_kind or info.kind, depth, info.comment)
    container.append(leaf)
    return leaf


def _find_directory(container: List[_Draft], name: str) -> Optional[_Draft]:
    for draft in reversed(container):
        if draft.name == name and draft.kind == NodeKind.DIRECTORY:
            return draft
    return None


def _freeze(draft: _Draft) -> Node:
    if draft.kind == NodeKind.FILE:
        return FileNode(id=draft.id, name=draft.name, comment=draft.comment, depth=draft.depth)
    children: Tuple[Node, ...] = tuple(_freeze(c) for c in draft.children)
    return DirectoryNode(
        id=draft.id,
        name=draft.name,
        comment=draft.comment,
        depth=draft.depth,
        children=children,
    )
