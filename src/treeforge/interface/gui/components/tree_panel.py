from __future__ import annotations

"""
Tree Preview Panel.

Shows the editable forest in a ttk.Treeview (node ids are used as item ids)
with bulk selection/expansion actions and a stats line. Excluded nodes are
rendered greyed out; their subtree stays visible so it can be re-included.
"""

import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Optional

import customtkinter as ctk

from treeforge.domain.node_models import DirectoryNode, Forest, Node
from treeforge.utils.i18n import i18n

EXCLUDED_TAG = "excluded"


class TreePanel(ctk.CTkFrame):
    """
    Forest preview plus the node and bulk action buttons.

    Callbacks are wired by the application: on_select receives the focused
    node id (or None), on_toggle receives the id of an opened/closed item.
    """

    def __init__(self, master: Any, **kwargs: Any):
        super().__init__(master, corner_radius=10, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self.on_select: Optional[Callable[[Optional[str]], None]] = None
        self.on_toggle: Optional[Callable[[str], None]] = None

        ctk.CTkLabel(
            self, text=i18n.t("gui.tree.label"), font=ctk.CTkFont(weight="bold")
        ).grid(row=0, column=0, padx=10, pady=(10, 5), sticky="w")

        # --- Treeview ---
        holder = tk.Frame(self)
        holder.grid(row=1, column=0, padx=10, pady=5, sticky="nsew")
        holder.grid_columnconfigure(0, weight=1)
        holder.grid_rowconfigure(0, weight=1)

        self.tree = ttk.Treeview(holder, columns=("comment",), selectmode="browse")
        self.tree.heading("#0", text=i18n.t("gui.editor.name"))
        self.tree.heading("comment", text=i18n.t("gui.editor.comment"))
        self.tree.column("comment", width=220, stretch=True)
        self.tree.tag_configure(EXCLUDED_TAG, foreground="gray")
        self.tree.grid(row=0, column=0, sticky="nsew")

        scroll = ttk.Scrollbar(holder, orient="vertical", command=self.tree.yview)
        scroll.grid(row=0, column=1, sticky="ns")
        self.tree.configure(yscrollcommand=scroll.set)

        self.tree.bind("<<TreeviewSelect>>", self._on_tree_select)
        self.tree.bind("<<TreeviewOpen>>", self._on_tree_toggle)
        self.tree.bind("<<TreeviewClose>>", self._on_tree_toggle)

        # --- Node actions ---
        node_bar = ctk.CTkFrame(self, fg_color="transparent")
        node_bar.grid(row=2, column=0, padx=10, pady=2, sticky="ew")
        self.btn_add_root = ctk.CTkButton(node_bar, text=i18n.t("gui.tree.btn_add_root"), width=90)
        self.btn_add_root.pack(side="left", padx=(0, 4))
        self.btn_add_child = ctk.CTkButton(node_bar, text=i18n.t("gui.tree.btn_add_child"), width=90)
        self.btn_add_child.pack(side="left", padx=4)
        self.btn_toggle_type = ctk.CTkButton(node_bar, text=i18n.t("gui.tree.btn_toggle_type"), width=100)
        self.btn_toggle_type.pack(side="left", padx=4)
        self.btn_toggle_include = ctk.CTkButton(
            node_bar, text=i18n.t("gui.tree.btn_toggle_include"), width=110
        )
        self.btn_toggle_include.pack(side="left", padx=4)
        self.btn_delete = ctk.CTkButton(
            node_bar, text=i18n.t("gui.tree.btn_delete"), width=80, fg_color="#A83232"
        )
        self.btn_delete.pack(side="right")

        # --- Bulk actions ---
        bulk_bar = ctk.CTkFrame(self, fg_color="transparent")
        bulk_bar.grid(row=3, column=0, padx=10, pady=2, sticky="ew")
        self.btn_select_all = ctk.CTkButton(
            bulk_bar, text=i18n.t("gui.tree.btn_select_all"), width=90, fg_color="gray"
        )
        self.btn_select_all.pack(side="left", padx=(0, 4))
        self.btn_deselect_all = ctk.CTkButton(
            bulk_bar, text=i18n.t("gui.tree.btn_deselect_all"), width=90, fg_color="gray"
        )
        self.btn_deselect_all.pack(side="left", padx=4)
        self.btn_expand_all = ctk.CTkButton(
            bulk_bar, text=i18n.t("gui.tree.btn_expand_all"), width=90, fg_color="gray"
        )
        self.btn_expand_all.pack(side="left", padx=4)
        self.btn_collapse_all = ctk.CTkButton(
            bulk_bar, text=i18n.t("gui.tree.btn_collapse_all"), width=90, fg_color="gray"
        )
        self.btn_collapse_all.pack(side="left", padx=4)

        self.lbl_stats = ctk.CTkLabel(self, text="", text_color="gray")
        self.lbl_stats.grid(row=4, column=0, padx=10, pady=(2, 10), sticky="w")

    # -------------------------------------------------------------------------
    # RENDERING
    # -------------------------------------------------------------------------

    def render(self, forest: Forest, selected_id: Optional[str] = None) -> None:
        """Rebuild the Treeview from a forest, restoring the focused item."""
        self.tree.delete(*self.tree.get_children(""))
        for node in forest:
            self._insert(node, "")
        if selected_id and self.tree.exists(selected_id):
            self.tree.selection_set(selected_id)
            self.tree.see(selected_id)

    def set_stats(self, text: str) -> None:
        self.lbl_stats.configure(text=text)

    def selected_id(self) -> Optional[str]:
        selection = self.tree.selection()
        return selection[0] if selection else None

    def _insert(self, node: Node, parent: str) -> None:
        label = f"{node.name}/" if isinstance(node, DirectoryNode) else node.name
        self.tree.insert(
            parent,
            "end",
            iid=node.id,
            text=label,
            values=(node.comment or "",),
            open=node.expanded,
            tags=() if node.selected else (EXCLUDED_TAG,),
        )
        if isinstance(node, DirectoryNode):
            for child in node.children:
                self._insert(child, node.id)

    # -------------------------------------------------------------------------
    # EVENTS
    # -------------------------------------------------------------------------

    def _on_tree_select(self, _event: Any) -> None:
        if self.on_select:
            self.on_select(self.selected_id())

    def _on_tree_toggle(self, _event: Any) -> None:
        item = self.tree.focus()
        if item and self.on_toggle:
            self.on_toggle(item)
