from __future__ import annotations

"""
Logging Lifecycle.

Wires the root logger to a single queue so that record formatting and file
I/O happen on a listener thread, away from the GUI event loop and the
execution workers. Setup is idempotent; a second call is a no-op unless
forced.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional, Sequence

from treeforge.infra.fs import get_user_data_dir
from treeforge.infra.logging.config import LEVEL_NAMES, LoggingConfig
from treeforge.infra.logging.handlers import (
    create_rotating_file_handler,
    is_treeforge_handler,
    tag_handler,
)

_CONFIGURED_ATTR: str = "_treeforge_configured"
_LISTENER_ATTR: str = "_treeforge_listener"

DEFAULT_LOG_FILE_NAME = "treeforge.log"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = DEFAULT_LOG_FILE_NAME) -> str:
    """
    Resolve the log file location inside the user data directory.

    Returns:
        str: Absolute path of the log file (the file may not exist yet).
    """
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(
        cfg: LoggingConfig,
        *,
        force: bool = False,
        extra_handlers: Sequence[logging.Handler] = (),
) -> logging.Logger:
    """
    Configure the root logger behind a QueueHandler/QueueListener pair.

    Args:
        cfg: Logging settings.
        force: Tear down a previous configuration and rebuild it.
        extra_handlers: Additional sinks fed by the listener (GUI log view).

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_ATTR, False) and not force:
        return root

    try:
        level = _parse_level(cfg.level)
        root.setLevel(level)
        _detach(root)

        sinks: List[logging.Handler] = []
        if cfg.console:
            sh = logging.StreamHandler(sys.stderr)
            sh.setLevel(level)
            sh.setFormatter(logging.Formatter(cfg.console_fmt))
            sinks.append(tag_handler(sh))

        if cfg.log_file:
            fh = create_rotating_file_handler(
                cfg.log_file,
                level,
                logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
                cfg.max_bytes,
                cfg.backup_count,
            )
            if fh is not None:
                sinks.append(fh)

        sinks.extend(tag_handler(h) for h in extra_handlers)
        if not sinks:
            return root

        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
        listener = QueueListener(log_queue, *sinks, respect_handler_level=True)
        listener.start()

        root.addHandler(tag_handler(QueueHandler(log_queue)))
        setattr(root, _LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_ATTR, True)
        atexit.register(_stop_listener, listener)
        return root

    except Exception as e:
        # Emergency console so diagnostics are never lost entirely
        _detach(root)
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("FALLBACK | %(levelname)s | %(message)s"))
        root.addHandler(tag_handler(sh))
        root.setLevel(logging.INFO)
        root.warning(f"Logging setup failed ({e}). Using emergency console output.")
        return root


def shutdown_logging() -> None:
    """Flush pending records and remove every treeforge handler from the root."""
    root = logging.getLogger()
    _detach(root)
    setattr(root, _CONFIGURED_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Return the tail of the log file, for crash reports and the GUI.

    Args:
        n_lines: Maximum number of trailing lines.
        log_path: Log file to read (default location when omitted).

    Returns:
        str: The tail, or a short notice when the file cannot be read.
    """
    path = log_path or get_default_log_path()
    if not os.path.exists(path):
        return "Log file not found."
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return "".join(f.readlines()[-n_lines:])
    except OSError as e:
        return f"Error retrieving logs: {e}"


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    if not level:
        return logging.INFO
    return LEVEL_NAMES.get(str(level).strip().upper(), logging.INFO)


def _detach(root: logging.Logger) -> None:
    """Stop the active listener and close the handlers treeforge installed."""
    listener = getattr(root, _LISTENER_ATTR, None)
    if listener is not None:
        _stop_listener(listener)
        setattr(root, _LISTENER_ATTR, None)

    for h in list(root.handlers):
        if is_treeforge_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_listener(listener: QueueListener) -> None:
    # QueueListener.stop() fails when called twice (atexit after a reset)
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
        for h in listener.handlers:
            h.close()
