from __future__ import annotations

"""
Logging Settings.

Immutable description of how the logging subsystem should be wired, plus the
mapping from textual level names to the stdlib numeric levels.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

LEVEL_NAMES: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings consumed by configure_logging.

    Attributes:
        level: Minimum severity captured ("DEBUG", "INFO", ...).
        console: Emit records to stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size threshold of a log segment before rotation.
        backup_count: Rotated segments kept on disk.
        console_fmt: Format of stderr lines.
        file_fmt: Format of log file lines.
        datefmt: Timestamp format of log file lines.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """Quiet console by default, full detail with --debug."""
        return cls(level="DEBUG" if debug else "WARNING", console=True, log_file=log_file)

    @classmethod
    def for_gui(cls, log_file: Optional[str]) -> "LoggingConfig":
        return cls(level="INFO", console=True, log_file=log_file)
