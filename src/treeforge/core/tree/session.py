from __future__ import annotations

"""
Tree Editing Session.

Owns the forest of a single editing session together with the node that is
currently open in the editor. Every method delegates to the pure mutation
algebra and swaps in the resulting forest value.
"""

import logging
from typing import List, Optional

from treeforge.core.parsing.structure_parser import parse_structure
from treeforge.core.tree import mutations
from treeforge.core.tree.mutations import NodeEdit, TreeStats
from treeforge.core.tree.paths import flatten, serialize_to_text
from treeforge.domain.execution_models import ExecutionItem
from treeforge.domain.node_models import Forest, IdGenerator, Node

logger = logging.getLogger(__name__)


class TreeSession:
    """
    Single-owner editing state: a forest plus the edited node id.

    The forest is replaced, never mutated, so a value obtained from
    `forest` stays valid after later edits.
    """

    def __init__(self, forest: Forest = (), ids: Optional[IdGenerator] = None):
        self._ids = ids or IdGenerator()
        self._forest: Forest = tuple(forest)
        self._edited_id: Optional[str] = None

    # -------------------------------------------------------------------------
    # STATE ACCESS
    # -------------------------------------------------------------------------

    @property
    def forest(self) -> Forest:
        return self._forest

    @property
    def edited_node(self) -> Optional[Node]:
        if self._edited_id is None:
            return None
        return mutations.find_node(self._forest, self._edited_id)

    @property
    def is_empty(self) -> bool:
        return not self._forest

    def stats(self) -> TreeStats:
        return mutations.tree_stats(self._forest)

    def execution_items(self) -> List[ExecutionItem]:
        return flatten(self._forest)

    def to_text(self, style: str = "indent") -> str:
        return serialize_to_text(self._forest, style=style)

    # -------------------------------------------------------------------------
    # WHOLE-FOREST OPERATIONS
    # -------------------------------------------------------------------------

    def parse_input(self, text: str) -> Forest:
        """Replace the forest with a fresh parse and clear the edit selection."""
        self._forest = parse_structure(text, self._ids)
        self._edited_id = None
        logger.info(f"Structure parsed: {mutations.count_nodes(self._forest)} node(s).")
        return self._forest

    def select_all(self) -> None:
        self._forest = mutations.select_all(self._forest)

    def deselect_all(self) -> None:
        self._forest = mutations.deselect_all(self._forest)

    def expand_all(self) -> None:
        self._forest = mutations.expand_all(self._forest)

    def collapse_all(self) -> None:
        self._forest = mutations.collapse_all(self._forest)

    # -------------------------------------------------------------------------
    # NODE OPERATIONS
    # -------------------------------------------------------------------------

    def select_node(self, node_id: Optional[str]) -> Optional[Node]:
        """Open a node in the editor; None or an unknown id clears the selection."""
        node = mutations.find_node(self._forest, node_id) if node_id else None
        self._edited_id = node.id if node else None
        return node

    def toggle_node(self, node_id: str) -> None:
        self._forest = mutations.toggle_expanded(self._forest, node_id)

    def set_node_selected(self, node_id: str, selected: bool) -> None:
        self._forest = mutations.set_selected(self._forest, node_id, selected)

    def toggle_node_type(self, node_id: str) -> None:
        self._forest = mutations.retype(self._forest, node_id)

    def update_node(self, node_id: str, edit: NodeEdit) -> Optional[str]:
        """
        Apply an editor submission.

        Returns:
            Optional[str]: Validation error, or None when the edit was applied
                           (the edit selection is then cleared).
        """
        self._forest, error = mutations.edit_node(self._forest, node_id, edit)
        if error is None:
            self._edited_id = None
        return error

    def delete_node(self, node_id: str) -> None:
        self._forest = mutations.delete_node(self._forest, node_id)
        if self._edited_id == node_id or (
                self._edited_id is not None and mutations.find_node(self._forest, self._edited_id) is None
        ):
            self._edited_id = None

    def add_root_node(self) -> Node:
        """Append a root directory and open it in the editor."""
        self._forest, node = mutations.add_root(self._forest, self._ids)
        self._edited_id = node.id
        return node

    def add_child_node(self, parent_id: str) -> Optional[Node]:
        self._forest, node = mutations.add_child(self._forest, parent_id, self._ids)
        return node
