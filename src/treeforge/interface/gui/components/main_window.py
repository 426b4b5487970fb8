from __future__ import annotations

"""
Main Application Window Factory.

Creates the root CustomTkinter window and its two-column grid: structure
input and execution on the left, tree preview and node editor on the right.
"""

import customtkinter as ctk

from treeforge.domain import constants as const
from treeforge.utils.i18n import i18n


def create_main_window(theme: str = "System") -> ctk.CTk:
    """
    Instantiate and configure the primary application window.

    Args:
        theme: Appearance mode ("System", "Light" or "Dark").

    Returns:
        ctk.CTk: The configured root application instance.
    """
    ctk.set_appearance_mode("System" if theme in ("", "SystemDefault") else theme)
    ctk.set_default_color_theme("blue")

    app = ctk.CTk()
    app.title(f"{i18n.t('gui.title')} - v{const.CURRENT_CONFIG_VERSION}")
    app.geometry("1200x780")
    app.minsize(900, 600)

    app.grid_columnconfigure(0, weight=1, uniform="cols")
    app.grid_columnconfigure(1, weight=1, uniform="cols")
    app.grid_rowconfigure(0, weight=3)
    app.grid_rowconfigure(1, weight=2)

    return app
