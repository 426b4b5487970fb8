from __future__ import annotations

"""
Modal Message Dialogs.

Thin wrapper over tkinter.messagebox handed to the controller, so the
controller itself never talks to Tk directly.
"""

import tkinter.messagebox as mb
from typing import Any, Optional

from treeforge.utils.i18n import i18n


class MessageDialogs:
    """Modal notifications parented to the application window."""

    def __init__(self, parent: Optional[Any] = None):
        self.parent = parent

    def show_error(self, title: str, message: str) -> None:
        mb.showerror(title, message, parent=self.parent)

    def show_warning(self, title: str, message: str) -> None:
        mb.showwarning(title, message, parent=self.parent)

    def show_info(self, title: str, message: str) -> None:
        mb.showinfo(title, message, parent=self.parent)

    def ask_yes_no(self, title: str, message: str) -> bool:
        return bool(mb.askyesno(title, message, parent=self.parent))


def show_crash_dialog(error_msg: str) -> None:
    """Last-resort fatal error alert with its own hidden root window."""
    from tkinter import Tk

    root = Tk()
    root.withdraw()
    try:
        mb.showerror(
            f"{i18n.t('app.name')} - {i18n.t('gui.dialogs.error_title')}",
            i18n.t("gui.dialogs.crash", error=error_msg),
            parent=root,
        )
    finally:
        root.destroy()
