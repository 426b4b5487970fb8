from __future__ import annotations

"""
Execution Panel.

Target directory selection (entry, browse, bookmarks), the dry-run switch,
the run button and a read-only log receiving per-item results and
application log lines.
"""

from typing import Any, List

import customtkinter as ctk

from treeforge.utils.i18n import i18n

RUN_COLOR = "#1F6AA5"


class ExecutionPanel(ctk.CTkFrame):
    """Target, options and result log of the create step."""

    def __init__(self, master: Any, **kwargs: Any):
        super().__init__(master, corner_radius=10, **kwargs)
        self.grid_columnconfigure(1, weight=1)
        self.grid_rowconfigure(4, weight=1)

        ctk.CTkLabel(
            self, text=i18n.t("gui.execution.label"), font=ctk.CTkFont(weight="bold")
        ).grid(row=0, column=0, columnspan=3, padx=10, pady=(10, 5), sticky="w")

        # --- Target ---
        ctk.CTkLabel(self, text=i18n.t("gui.execution.target")).grid(
            row=1, column=0, padx=10, pady=4, sticky="w"
        )
        self.entry_target = ctk.CTkEntry(self)
        self.entry_target.grid(row=1, column=1, padx=5, pady=4, sticky="ew")
        self.btn_browse = ctk.CTkButton(self, text=i18n.t("gui.execution.btn_browse"), width=90)
        self.btn_browse.grid(row=1, column=2, padx=(5, 10), pady=4)

        # --- Bookmarks ---
        ctk.CTkLabel(self, text=i18n.t("gui.execution.saved")).grid(
            row=2, column=0, padx=10, pady=4, sticky="w"
        )
        self.combo_saved = ctk.CTkComboBox(self, values=[""], state="readonly")
        self.combo_saved.grid(row=2, column=1, padx=5, pady=4, sticky="ew")
        self.btn_bookmark = ctk.CTkButton(
            self, text=i18n.t("gui.execution.btn_bookmark"), width=90, fg_color="gray"
        )
        self.btn_bookmark.grid(row=2, column=2, padx=(5, 10), pady=4)

        # --- Run ---
        run_bar = ctk.CTkFrame(self, fg_color="transparent")
        run_bar.grid(row=3, column=0, columnspan=3, padx=10, pady=4, sticky="ew")
        self.sw_dry_run = ctk.CTkSwitch(run_bar, text=i18n.t("gui.execution.dry_run"))
        self.sw_dry_run.pack(side="left")
        self.btn_run = ctk.CTkButton(
            run_bar, text=i18n.t("gui.execution.btn_run"), fg_color=RUN_COLOR, width=160
        )
        self.btn_run.pack(side="right")

        # --- Result log ---
        self.textbox = ctk.CTkTextbox(self, state="disabled", font=("Consolas", 10), height=120)
        self.textbox.grid(row=4, column=0, columnspan=3, padx=10, pady=(4, 10), sticky="nsew")

    # -------------------------------------------------------------------------
    # FIELD ACCESS
    # -------------------------------------------------------------------------

    def get_target(self) -> str:
        return self.entry_target.get().strip()

    def set_target(self, path: str) -> None:
        self.entry_target.delete(0, "end")
        self.entry_target.insert(0, path or "")

    def get_dry_run(self) -> bool:
        return bool(self.sw_dry_run.get())

    def set_dry_run(self, value: bool) -> None:
        if value:
            self.sw_dry_run.select()
        else:
            self.sw_dry_run.deselect()

    def set_saved_paths(self, paths: List[str]) -> None:
        self.combo_saved.configure(values=list(paths) or [""])
        self.combo_saved.set("")

    def set_running(self, running: bool) -> None:
        if running:
            self.btn_run.configure(state="disabled", text=i18n.t("gui.execution.btn_running"), fg_color="gray")
        else:
            self.btn_run.configure(state="normal", text=i18n.t("gui.execution.btn_run"), fg_color=RUN_COLOR)

    # -------------------------------------------------------------------------
    # RESULT LOG
    # -------------------------------------------------------------------------

    def append_log(self, msg: str) -> None:
        self.textbox.configure(state="normal")
        self.textbox.insert("end", msg + "\n")
        self.textbox.see("end")
        self.textbox.configure(state="disabled")

    def clear_log(self) -> None:
        self.textbox.configure(state="normal")
        self.textbox.delete("1.0", "end")
        self.textbox.configure(state="disabled")
