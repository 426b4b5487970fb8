from __future__ import annotations

"""
Node Editor Panel.

Form over the editable fields of the node currently open in the editor.
"""

from typing import Any, Optional

import customtkinter as ctk

from treeforge.core.tree.mutations import NodeEdit
from treeforge.domain.node_models import Node, NodeKind
from treeforge.utils.i18n import i18n


class EditorPanel(ctk.CTkFrame):
    """Name, kind, comment and include fields with save/cancel actions."""

    def __init__(self, master: Any, **kwargs: Any):
        super().__init__(master, corner_radius=10, **kwargs)
        self.grid_columnconfigure(1, weight=1)

        self._kind_labels = {
            i18n.t("gui.editor.kind_file"): NodeKind.FILE,
            i18n.t("gui.editor.kind_directory"): NodeKind.DIRECTORY,
        }

        ctk.CTkLabel(
            self, text=i18n.t("gui.editor.label"), font=ctk.CTkFont(weight="bold")
        ).grid(row=0, column=0, columnspan=2, padx=10, pady=(10, 5), sticky="w")

        ctk.CTkLabel(self, text=i18n.t("gui.editor.name")).grid(row=1, column=0, padx=10, pady=4, sticky="w")
        self.entry_name = ctk.CTkEntry(self)
        self.entry_name.grid(row=1, column=1, padx=10, pady=4, sticky="ew")

        ctk.CTkLabel(self, text=i18n.t("gui.editor.kind")).grid(row=2, column=0, padx=10, pady=4, sticky="w")
        self.seg_kind = ctk.CTkSegmentedButton(self, values=list(self._kind_labels.keys()))
        self.seg_kind.grid(row=2, column=1, padx=10, pady=4, sticky="w")

        ctk.CTkLabel(self, text=i18n.t("gui.editor.comment")).grid(row=3, column=0, padx=10, pady=4, sticky="w")
        self.entry_comment = ctk.CTkEntry(self)
        self.entry_comment.grid(row=3, column=1, padx=10, pady=4, sticky="ew")

        self.chk_include = ctk.CTkCheckBox(self, text=i18n.t("gui.editor.include"))
        self.chk_include.grid(row=4, column=1, padx=10, pady=4, sticky="w")

        bar = ctk.CTkFrame(self, fg_color="transparent")
        bar.grid(row=5, column=0, columnspan=2, padx=10, pady=(5, 10), sticky="ew")
        self.btn_save = ctk.CTkButton(bar, text=i18n.t("gui.editor.btn_save"), width=90)
        self.btn_save.pack(side="left", padx=(0, 5))
        self.btn_cancel = ctk.CTkButton(
            bar, text=i18n.t("gui.editor.btn_cancel"), width=90, fg_color="gray"
        )
        self.btn_cancel.pack(side="left", padx=5)

        self.lbl_hint = ctk.CTkLabel(bar, text="", text_color="gray")
        self.lbl_hint.pack(side="right")

        self.clear()

    def show_node(self, node: Node) -> None:
        self._set_enabled(True)
        self.entry_name.delete(0, "end")
        self.entry_name.insert(0, node.name)
        self.seg_kind.set(self._label_for(node.kind))
        self.entry_comment.delete(0, "end")
        self.entry_comment.insert(0, node.comment or "")
        if node.selected:
            self.chk_include.select()
        else:
            self.chk_include.deselect()
        self.lbl_hint.configure(text="")

    def clear(self) -> None:
        # Disabled entries ignore delete()
        self._set_enabled(True)
        self.entry_name.delete(0, "end")
        self.entry_comment.delete(0, "end")
        self.seg_kind.set("")
        self.chk_include.deselect()
        self._set_enabled(False)
        self.lbl_hint.configure(text=i18n.t("gui.editor.no_selection"))

    def read_edit(self) -> NodeEdit:
        """Collect the form into a NodeEdit (validation happens in the core)."""
        kind: Optional[NodeKind] = self._kind_labels.get(self.seg_kind.get())
        return NodeEdit(
            name=self.entry_name.get(),
            kind=kind or NodeKind.FILE,
            comment=self.entry_comment.get(),
            selected=bool(self.chk_include.get()),
        )

    def _label_for(self, kind: NodeKind) -> str:
        for label, value in self._kind_labels.items():
            if value == kind:
                return label
        return ""

    def _set_enabled(self, enabled: bool) -> None:
        state = "normal" if enabled else "disabled"
        for widget in (self.entry_name, self.seg_kind, self.entry_comment,
                       self.chk_include, self.btn_save, self.btn_cancel):
            widget.configure(state=state)
