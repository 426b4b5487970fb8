from __future__ import annotations

"""
Structure Input Panel.

Multi-line text area receiving the pasted directory rendering, plus the
actions that feed it to the parser.
"""

from typing import Any

import customtkinter as ctk

from treeforge.utils.i18n import i18n


class InputPanel(ctk.CTkFrame):
    """Textbox and parse/example/open/clear buttons."""

    def __init__(self, master: Any, **kwargs: Any):
        super().__init__(master, corner_radius=10, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(
            self, text=i18n.t("gui.input.label"), font=ctk.CTkFont(weight="bold")
        ).grid(row=0, column=0, padx=10, pady=(10, 5), sticky="w")

        self.textbox = ctk.CTkTextbox(self, font=("Consolas", 12), wrap="none", undo=True)
        self.textbox.grid(row=1, column=0, padx=10, pady=5, sticky="nsew")

        bar = ctk.CTkFrame(self, fg_color="transparent")
        bar.grid(row=2, column=0, padx=10, pady=(5, 10), sticky="ew")

        self.btn_parse = ctk.CTkButton(bar, text=i18n.t("gui.input.btn_parse"), width=100)
        self.btn_parse.pack(side="left", padx=(0, 5))
        self.btn_example = ctk.CTkButton(
            bar, text=i18n.t("gui.input.btn_example"), width=110, fg_color="gray"
        )
        self.btn_example.pack(side="left", padx=5)
        self.btn_open = ctk.CTkButton(
            bar, text=i18n.t("gui.input.btn_open"), width=110, fg_color="gray"
        )
        self.btn_open.pack(side="left", padx=5)
        self.btn_clear = ctk.CTkButton(
            bar, text=i18n.t("gui.input.btn_clear"), width=80, fg_color="transparent", border_width=1
        )
        self.btn_clear.pack(side="right")

    def get_text(self) -> str:
        return self.textbox.get("1.0", "end-1c")

    def set_text(self, text: str) -> None:
        self.textbox.delete("1.0", "end")
        self.textbox.insert("1.0", text)
