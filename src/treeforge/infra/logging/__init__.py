from __future__ import annotations

from .config import LoggingConfig
from .core import (
    configure_logging,
    get_default_log_path,
    get_logger,
    get_recent_logs,
    shutdown_logging,
)
from .handlers import CallbackHandler

__all__ = [
    "LoggingConfig",
    "CallbackHandler",
    "configure_logging",
    "shutdown_logging",
    "get_logger",
    "get_recent_logs",
    "get_default_log_path",
]
