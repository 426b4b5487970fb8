from __future__ import annotations

"""
GUI Entrypoint and Application Lifecycle.

Sets up logging (including the in-window activity log), recovers the
persisted state, assembles the panels, binds them to the TreeController and
runs the Tk main loop. Session settings are persisted on close.
"""

import logging
import queue

import customtkinter as ctk

from treeforge.domain import config as cfg
from treeforge.domain import constants as const
from treeforge.infra.logging import (
    CallbackHandler,
    LoggingConfig,
    configure_logging,
    get_default_log_path,
)
from treeforge.interface.gui.components.editor_panel import EditorPanel
from treeforge.interface.gui.components.execution_panel import ExecutionPanel
from treeforge.interface.gui.components.input_panel import InputPanel
from treeforge.interface.gui.components.main_window import create_main_window
from treeforge.interface.gui.components.tree_panel import TreePanel
from treeforge.interface.gui.controllers.main_controller import TreeController
from treeforge.utils.i18n import i18n

logger = logging.getLogger(__name__)

LOG_POLL_MS = 150


def main() -> None:
    """Initialize and launch the graphical interface."""
    # -------------------------------------------------------------------------
    # PHASE 1: LOGGING (file + in-window activity log)
    # -------------------------------------------------------------------------
    gui_log_queue: "queue.Queue[str]" = queue.Queue()
    configure_logging(
        LoggingConfig.for_gui(get_default_log_path()),
        extra_handlers=[CallbackHandler(gui_log_queue.put, level=logging.INFO)],
    )
    logger.info(f"GUI Lifecycle: Initializing v{const.CURRENT_CONFIG_VERSION}")

    # -------------------------------------------------------------------------
    # PHASE 2: PERSISTENT STATE RECOVERY
    # -------------------------------------------------------------------------
    app_state = cfg.load_app_state()
    config = cfg.load_config()
    i18n.load_locale(app_state["app_settings"].get("locale", "en"))

    # -------------------------------------------------------------------------
    # PHASE 3: VIEW CONSTRUCTION
    # -------------------------------------------------------------------------
    app = create_main_window(app_state["app_settings"].get("theme", "System"))

    input_view = InputPanel(app)
    input_view.grid(row=0, column=0, sticky="nsew", padx=(10, 5), pady=(10, 5))
    execution_view = ExecutionPanel(app)
    execution_view.grid(row=1, column=0, sticky="nsew", padx=(10, 5), pady=(5, 10))
    tree_view = TreePanel(app)
    tree_view.grid(row=0, column=1, sticky="nsew", padx=(5, 10), pady=(10, 5))
    editor_view = EditorPanel(app)
    editor_view.grid(row=1, column=1, sticky="nsew", padx=(5, 10), pady=(5, 10))

    # -------------------------------------------------------------------------
    # PHASE 4: CONTROLLER BINDING
    # -------------------------------------------------------------------------
    controller = TreeController(app, config, app_state)
    controller.register_views(input_view, tree_view, editor_view, execution_view)
    controller.sync_view_from_config()
    controller.refresh_tree()

    input_view.btn_parse.configure(command=controller.on_parse)
    input_view.btn_example.configure(command=controller.on_load_example)
    input_view.btn_clear.configure(command=controller.on_clear)
    input_view.btn_open.configure(command=lambda: _choose_structure_file(app, controller))

    tree_view.on_select = controller.on_node_selected
    tree_view.on_toggle = controller.on_node_toggled
    tree_view.btn_add_root.configure(command=controller.on_add_root)
    tree_view.btn_add_child.configure(command=controller.on_add_child)
    tree_view.btn_toggle_type.configure(command=controller.on_toggle_type)
    tree_view.btn_toggle_include.configure(command=controller.on_toggle_include)
    tree_view.btn_delete.configure(command=controller.on_delete)
    tree_view.btn_select_all.configure(command=controller.on_select_all)
    tree_view.btn_deselect_all.configure(command=controller.on_deselect_all)
    tree_view.btn_expand_all.configure(command=controller.on_expand_all)
    tree_view.btn_collapse_all.configure(command=controller.on_collapse_all)

    editor_view.btn_save.configure(command=controller.on_save_edit)
    editor_view.btn_cancel.configure(command=controller.on_cancel_edit)

    execution_view.btn_browse.configure(command=lambda: _choose_target(app, execution_view))
    execution_view.btn_bookmark.configure(command=controller.on_bookmark)
    execution_view.combo_saved.configure(command=controller.on_saved_path_chosen)
    execution_view.btn_run.configure(command=controller.start_apply)

    # -------------------------------------------------------------------------
    # PHASE 5: LOG POLLING
    # -------------------------------------------------------------------------
    def poll_log_queue() -> None:
        while True:
            try:
                execution_view.append_log(gui_log_queue.get_nowait())
            except queue.Empty:
                break
        app.after(LOG_POLL_MS, poll_log_queue)

    # -------------------------------------------------------------------------
    # PHASE 6: LIFECYCLE FINALIZATION
    # -------------------------------------------------------------------------
    def on_closing() -> None:
        controller.sync_config_from_view()
        app_state["last_session"] = controller.config
        cfg.save_app_state(app_state)
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_closing)
    app.after(LOG_POLL_MS, poll_log_queue)
    app.mainloop()


# -----------------------------------------------------------------------------
# PRIVATE UI HELPERS
# -----------------------------------------------------------------------------

def _choose_structure_file(app: ctk.CTk, controller: TreeController) -> None:
    path = ctk.filedialog.askopenfilename(
        parent=app,
        title=i18n.t("gui.input.btn_open"),
        filetypes=[("Text", "*.txt *.md"), ("All files", "*.*")],
    )
    if path:
        controller.on_open_file(path)


def _choose_target(app: ctk.CTk, execution_view: ExecutionPanel) -> None:
    path = ctk.filedialog.askdirectory(parent=app, title=i18n.t("gui.execution.target"))
    if path:
        execution_view.set_target(path)


if __name__ == "__main__":
    main()
