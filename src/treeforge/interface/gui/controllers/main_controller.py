from __future__ import annotations

"""
Main Application Controller.

Bridges the views (input, tree, editor, execution panels) and the editing
session. Every user action becomes one TreeSession call followed by a
re-render, and the apply step is dispatched to a background thread whose
result is marshalled back with app.after().
"""

import logging
import os
import threading
from dataclasses import asdict
from typing import Any, Dict, Optional

from treeforge.core.execution.validator import validate_config
from treeforge.core.tree.session import TreeSession
from treeforge.domain import config as cfg
from treeforge.domain import constants as const
from treeforge.domain.execution_models import ApplyResult
from treeforge.interface.gui import threads
from treeforge.utils.i18n import i18n

logger = logging.getLogger(__name__)

# ==============================================================================
# PRIMARY APPLICATION CONTROLLER
# ==============================================================================

class TreeController:
    """
    Owns the TreeSession of the window and mediates every view event.

    The controller holds no widget state of its own; views are registered
    after construction and dialogs are injected so that the class can be
    driven without a display.
    """

    def __init__(
            self,
            app: Any,
            config: Dict[str, Any],
            app_state: Dict[str, Any],
            dialogs: Optional[Any] = None,
            session: Optional[TreeSession] = None,
    ):
        """
        Args:
            app: Root window (anything exposing after()).
            config: Active session configuration dictionary.
            app_state: Global persistent application state.
            dialogs: Modal notifier (MessageDialogs when omitted).
            session: Editing session (a fresh one when omitted).
        """
        self.app = app
        self.config = config
        self.app_state = app_state
        self.session = session or TreeSession()
        self.is_running = False

        if dialogs is None:
            from treeforge.interface.gui.dialogs import MessageDialogs
            dialogs = MessageDialogs(app)
        self.dialogs = dialogs

        self.input_view: Any = None
        self.tree_view: Any = None
        self.editor_view: Any = None
        self.execution_view: Any = None

    # -------------------------------------------------------------------------
    # VIEW REGISTRATION & SYNC
    # -------------------------------------------------------------------------

    def register_views(self, input_view: Any, tree_view: Any, editor_view: Any, execution_view: Any) -> None:
        self.input_view = input_view
        self.tree_view = tree_view
        self.editor_view = editor_view
        self.execution_view = execution_view

    def sync_view_from_config(self) -> None:
        """Populate the execution panel from the session configuration."""
        if not self.execution_view:
            return
        self.execution_view.set_target(self.config.get("target_path", ""))
        self.execution_view.set_dry_run(bool(self.config.get("dry_run", False)))
        self.execution_view.set_saved_paths(self.app_state.get("saved_paths", []))

    def sync_config_from_view(self) -> None:
        if not self.execution_view:
            return
        self.config["target_path"] = self.execution_view.get_target()
        self.config["dry_run"] = self.execution_view.get_dry_run()

    # -------------------------------------------------------------------------
    # INPUT EVENTS
    # -------------------------------------------------------------------------

    def on_parse(self) -> None:
        forest = self.session.parse_input(self.input_view.get_text())
        self.editor_view.clear()
        self.refresh_tree()
        if not forest:
            self.dialogs.show_info(i18n.t("gui.dialogs.info_title"), i18n.t("gui.dialogs.parse_empty"))

    def on_load_example(self) -> None:
        self.input_view.set_text(const.EXAMPLE_STRUCTURE)
        self.on_parse()

    def on_open_file(self, path: str) -> None:
        """Load a structure file into the input area and parse it."""
        if not path:
            return
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Controller: cannot open structure file '{path}': {e}")
            self.dialogs.show_error(
                i18n.t("gui.dialogs.error_title"),
                i18n.t("gui.dialogs.open_failed", error=str(e)),
            )
            return
        self.input_view.set_text(text)
        self.on_parse()

    def on_clear(self) -> None:
        self.input_view.set_text("")
        self.session.parse_input("")
        self.editor_view.clear()
        self.refresh_tree()

    # -------------------------------------------------------------------------
    # TREE EVENTS
    # -------------------------------------------------------------------------

    def on_node_selected(self, node_id: Optional[str]) -> None:
        node = self.session.select_node(node_id)
        if node is None:
            self.editor_view.clear()
        else:
            self.editor_view.show_node(node)

    def on_node_toggled(self, node_id: str) -> None:
        # Treeview already reflects the new state; only the model changes
        self.session.toggle_node(node_id)

    def on_toggle_include(self) -> None:
        node = self.session.edited_node
        if node is None:
            return
        self.session.set_node_selected(node.id, not node.selected)
        self._refresh_edited()

    def on_toggle_type(self) -> None:
        node = self.session.edited_node
        if node is None:
            return
        self.session.toggle_node_type(node.id)
        self._refresh_edited()

    def on_add_root(self) -> None:
        node = self.session.add_root_node()
        self.editor_view.show_node(node)
        self.refresh_tree()

    def on_add_child(self) -> None:
        parent = self.session.edited_node
        if parent is None:
            return
        self.session.add_child_node(parent.id)
        self._refresh_edited()

    def on_delete(self) -> None:
        node = self.session.edited_node
        if node is None:
            return
        if not self.dialogs.ask_yes_no(
                i18n.t("gui.dialogs.confirm_title"),
                i18n.t("gui.dialogs.confirm_delete", name=node.name),
        ):
            return
        self.session.delete_node(node.id)
        self.editor_view.clear()
        self.refresh_tree()

    def on_select_all(self) -> None:
        self.session.select_all()
        self._refresh_edited()

    def on_deselect_all(self) -> None:
        self.session.deselect_all()
        self._refresh_edited()

    def on_expand_all(self) -> None:
        self.session.expand_all()
        self.refresh_tree()

    def on_collapse_all(self) -> None:
        self.session.collapse_all()
        self.refresh_tree()

    # -------------------------------------------------------------------------
    # EDITOR EVENTS
    # -------------------------------------------------------------------------

    def on_save_edit(self) -> None:
        node = self.session.edited_node
        if node is None:
            return
        error = self.session.update_node(node.id, self.editor_view.read_edit())
        if error:
            self.dialogs.show_error(i18n.t("gui.dialogs.error_title"), error)
            return
        self.editor_view.clear()
        self.refresh_tree()

    def on_cancel_edit(self) -> None:
        self.session.select_node(None)
        self.editor_view.clear()
        self.refresh_tree()

    # -------------------------------------------------------------------------
    # TARGET & BOOKMARKS
    # -------------------------------------------------------------------------

    def on_bookmark(self) -> None:
        target = self.execution_view.get_target()
        if not target:
            return
        paths = cfg.add_saved_path(target)
        self.app_state["saved_paths"] = paths
        self.execution_view.set_saved_paths(paths)

    def on_saved_path_chosen(self, path: str) -> None:
        if path:
            self.execution_view.set_target(path)

    # -------------------------------------------------------------------------
    # APPLY EXECUTION
    # -------------------------------------------------------------------------

    def start_apply(self) -> None:
        """
        Validate the target and dispatch the apply step to a daemon thread.

        The forest is captured as an immutable snapshot; edits made while the
        run is in progress do not affect it.
        """
        if self.is_running:
            return
        self.sync_config_from_view()
        settings, warnings = validate_config(self.config)
        for w in warnings:
            logger.warning(f"Configuration Constraint: {w}")

        target = settings["target_path"]
        if not target or not os.path.isdir(target):
            self.dialogs.show_error(i18n.t("gui.dialogs.error_title"), i18n.t("gui.dialogs.invalid_target"))
            return

        if not self.session.execution_items():
            self.dialogs.show_info(i18n.t("gui.dialogs.info_title"), i18n.t("gui.dialogs.nothing_selected"))
            return

        self.is_running = True
        self.execution_view.set_running(True)
        self.execution_view.clear_log()
        logger.debug(f"Starting apply (DryRun={settings['dry_run']}) into '{target}'.")

        threading.Thread(
            target=threads.run_apply_task,
            args=(self.session.forest, target, settings, self._on_apply_complete),
            daemon=True,
        ).start()

    def _on_apply_complete(self, result: Any) -> None:
        """Marshal the worker outcome back onto the GUI thread."""
        self.app.after(0, lambda: self.handle_apply_result(result))

    def handle_apply_result(self, result: Any) -> None:
        self.is_running = False
        self.execution_view.set_running(False)

        if isinstance(result, Exception):
            self.dialogs.show_error(
                i18n.t("gui.dialogs.error_title"),
                i18n.t("gui.dialogs.crash", error=str(result)),
            )
            return
        if not isinstance(result, ApplyResult):
            return

        for res in result.results:
            key = "gui.execution.result_ok" if res.success else "gui.execution.result_fail"
            self.execution_view.append_log(i18n.t(key, path=res.path, message=res.message or ""))
        self.execution_view.append_log(
            i18n.t("gui.execution.summary", succeeded=result.succeeded, failed=result.failed)
        )

        title_info = i18n.t("gui.dialogs.info_title")
        if not result.ok:
            self.dialogs.show_error(
                i18n.t("gui.dialogs.error_title"),
                i18n.t("gui.dialogs.apply_failed", error=result.error),
            )
        elif result.failed:
            self.dialogs.show_warning(
                i18n.t("gui.dialogs.error_title"),
                i18n.t("gui.dialogs.apply_partial", failed=result.failed, total=len(result.results)),
            )
        elif result.dry_run:
            self.dialogs.show_info(title_info, i18n.t("gui.dialogs.dry_run_done", total=len(result.results)))
        else:
            self.dialogs.show_info(
                title_info,
                i18n.t("gui.dialogs.apply_done", succeeded=result.succeeded, path=result.target_path),
            )

    # -------------------------------------------------------------------------
    # RENDERING
    # -------------------------------------------------------------------------

    def refresh_tree(self) -> None:
        edited = self.session.edited_node
        self.tree_view.render(self.session.forest, edited.id if edited else None)
        self.tree_view.set_stats(i18n.t("gui.tree.stats", **asdict(self.session.stats())))

    def _refresh_edited(self) -> None:
        """Re-render and reload the editor with the edited node's new state."""
        node = self.session.edited_node
        if node is None:
            self.editor_view.clear()
        else:
            self.editor_view.show_node(node)
        self.refresh_tree()
