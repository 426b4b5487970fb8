from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Routes execution to the CLI (any argument present) or the GUI, and installs
a process-wide exception hook so that fatal crashes are logged and reported
in a way suited to the active interface.
"""

import logging
import os
import sys
import traceback
from typing import Any

# Make 'treeforge' importable when this file is run directly from a checkout
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if not getattr(sys, "frozen", False):
    SRC_DIR = os.path.dirname(BASE_DIR)
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)


# -----------------------------------------------------------------------------
# GLOBAL SUPERVISOR
# -----------------------------------------------------------------------------

def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Log an unhandled exception and report it through the active interface.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    if issubclass(exctype, KeyboardInterrupt):
        sys.__excepthook__(exctype, value, tb)
        return

    stack_trace = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger("treeforge.supervisor").critical(f"FATAL EXCEPTION: {value}\n{stack_trace}")

    if len(sys.argv) > 1:
        print("\n" + "=" * 80, file=sys.stderr)
        print("CRITICAL ERROR (TREEFORGE CLI)", file=sys.stderr)
        print("=" * 80, file=sys.stderr)
        print(stack_trace, file=sys.stderr)
        return

    try:
        from treeforge.interface.gui.dialogs import show_crash_dialog
        show_crash_dialog(str(value))
    except Exception as e:
        print(f"CRITICAL SYSTEM ERROR: {value}\n{stack_trace}\n(dialog failed: {e})", file=sys.stderr)


sys.excepthook = global_exception_handler


# -----------------------------------------------------------------------------
# EXECUTION ROUTING
# -----------------------------------------------------------------------------

def main() -> int:
    """
    Dispatch to the CLI when arguments are present, otherwise to the GUI.

    Returns:
        int: Process exit code.
    """
    try:
        if len(sys.argv) > 1:
            from treeforge.interface.cli.app import main as cli_main
            return cli_main()

        from treeforge.interface.gui.app import main as gui_main
        gui_main()
        return 0

    except Exception as e:
        global_exception_handler(type(e), e, e.__traceback__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
