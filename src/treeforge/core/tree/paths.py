from __future__ import annotations

"""
Path Resolver and Tree Serializer.

Linearizes a forest into (path, kind) execution items and re-renders it as
text the structure parser accepts, either as plain indentation or with
tree-drawing connectors. Both directions honour the same top-down selection
rule: an unselected node hides its entire subtree.
"""

from typing import List

from treeforge.domain import constants as const
from treeforge.domain.execution_models import ExecutionItem
from treeforge.domain.node_models import DirectoryNode, Forest, Node, NodeKind

EXCLUDED_MARK = "  (excluded)"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def flatten(forest: Forest) -> List[ExecutionItem]:
    """
    Convert a forest into an order-preserving list of selected entries.

    Path of a node is its parent's path plus '/' plus its own name; a root's
    path is its name. Selection is evaluated top-down as nodes are reached.

    Args:
        forest: Forest to linearize.

    Returns:
        List[ExecutionItem]: Items in pre-order.
    """
    items: List[ExecutionItem] = []
    _collect(forest, "", items)
    return items


def serialize_to_text(forest: Forest, style: str = "indent") -> str:
    """
    Render the selected part of a forest back into structure text.

    The first emitted line always re-parses as a directory, so a forest
    whose first selected root is a file reads back with that root retyped.

    Args:
        forest: Forest to serialize.
        style: "indent" for two-space indentation, "tree" for connectors.

    Returns:
        str: Newline-terminated text, empty for an empty selection.

    Raises:
        ValueError: If the style is unknown.
    """
    if style not in const.SERIALIZE_STYLES:
        raise ValueError(f"Unknown serialization style: {style}")

    lines: List[str] = []
    if style == "indent":
        _render_indented(forest, 0, lines)
    else:
        for root in forest:
            if not root.selected:
                continue
            lines.append(_entry_text(root))
            if isinstance(root, DirectoryNode):
                _render_glyphs(root.children, "", lines, include_unselected=False, only_expanded=False)

    return "".join(line + "\n" for line in lines)


def render_tree_lines(
        forest: Forest,
        *,
        include_unselected: bool = True,
        only_expanded: bool = False,
) -> List[str]:
    """
    Build preview lines with tree connectors.

    Unselected nodes are kept and marked when include_unselected is True.

    Args:
        forest: Forest to render.
        include_unselected: Keep excluded subtrees visible.
        only_expanded: Hide the children of collapsed directories.

    Returns:
        List[str]: Visual lines.
    """
    lines: List[str] = []
    for root in forest:
        if not root.selected and not include_unselected:
            continue
        lines.append(_entry_text(root, mark_excluded=not root.selected))
        if isinstance(root, DirectoryNode) and (root.expanded or not only_expanded):
            _render_glyphs(
                root.children, "", lines,
                include_unselected=include_unselected,
                only_expanded=only_expanded,
            )
    return lines

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _collect(nodes: Forest, parent_path: str, items: List[ExecutionItem]) -> None:
    for node in nodes:
        if not node.selected:
            continue
        path = f"{parent_path}/{node.name}" if parent_path else node.name
        items.append(ExecutionItem(path=path, kind=node.kind))
        if isinstance(node, DirectoryNode):
            _collect(node.children, path, items)


def _display_name(node: Node) -> str:
    """Name plus the marker that makes a re-parse infer the same kind."""
    if node.kind == NodeKind.DIRECTORY:
        return node.name + const.DIRECTORY_MARKER
    if "." not in node.name:
        return node.name + const.FILE_MARKER
    return node.name


def _entry_text(node: Node, mark_excluded: bool = False) -> str:
    text = _display_name(node)
    if node.comment:
        text += f" {const.COMMENT_MARKER} {' '.join(node.comment.split())}"
    if mark_excluded:
        text += EXCLUDED_MARK
    return text


def _render_indented(nodes: Forest, level: int, lines: List[str]) -> None:
    indent = " " * (const.INDENT_WIDTH * level)
    for node in nodes:
        if not node.selected:
            continue
        lines.append(indent + _entry_text(node))
        if isinstance(node, DirectoryNode):
            _render_indented(node.children, level + 1, lines)


def _render_glyphs(
        nodes: Forest,
        prefix: str,
        lines: List[str],
        *,
        include_unselected: bool,
        only_expanded: bool,
) -> None:
    """Recursively emit connector lines for a sibling group."""
    visible = [n for n in nodes if n.selected or include_unselected]
    total = len(visible)

    for i, node in enumerate(visible):
        is_last = (i == total - 1)
        connector = const.LAST_BRANCH if is_last else const.BRANCH
        lines.append(f"{prefix}{connector}{_entry_text(node, mark_excluded=not node.selected)}")

        if isinstance(node, DirectoryNode) and (node.expanded or not only_expanded):
            child_prefix = prefix + (const.SPACE_PREFIX if is_last else const.PIPE_PREFIX)
            _render_glyphs(
                node.children, child_prefix, lines,
                include_unselected=include_unselected,
                only_expanded=only_expanded,
            )
