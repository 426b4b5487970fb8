from __future__ import annotations

"""
Logging Handlers.

Factories for the handlers managed by treeforge and the tag that lets the
setup code tell them apart from handlers installed by third parties (pytest
caplog, embedding applications).
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Callable, Optional

_HANDLER_TAG_ATTR: str = "_treeforge_handler"


# ==============================================================================
# HANDLER TAGGING
# ==============================================================================

def tag_handler(handler: logging.Handler) -> logging.Handler:
    """Mark a handler as owned by treeforge and return it."""
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def is_treeforge_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


# ==============================================================================
# HANDLER FACTORIES
# ==============================================================================

def create_rotating_file_handler(
        log_file: str,
        level: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Open a rotating log file, creating its directory first.

    Returns:
        Optional[RotatingFileHandler]: The handler, or None when the file
            cannot be opened (a warning is written to stderr instead).
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: cannot open log file '{log_file}': {e}\n")
        return None

    fh.setLevel(level)
    fh.setFormatter(formatter)
    tag_handler(fh)
    return fh


class CallbackHandler(logging.Handler):
    """
    Forward formatted records to a callable.

    Used by the GUI activity log. The callback runs on the logging listener
    thread, so GUI consumers must marshal onto their own event loop.
    """

    def __init__(self, callback: Callable[[str], None], level: int = logging.INFO):
        super().__init__(level)
        self._callback = callback
        self.setFormatter(logging.Formatter("%(levelname)s | %(message)s"))
        tag_handler(self)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._callback(self.format(record))
        except Exception:
            self.handleError(record)
