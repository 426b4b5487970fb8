from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, log file rotation and the GUI callback sink.
"""

import logging
import time
from pathlib import Path
from typing import List

import pytest

from treeforge.infra.logging import (
    CallbackHandler,
    LoggingConfig,
    configure_logging,
    get_recent_logs,
    shutdown_logging,
)
from treeforge.infra.logging.handlers import is_treeforge_handler


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Tear down treeforge handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_force_reconfigures_level() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    configure_logging(LoggingConfig(level="DEBUG"), force=True)
    assert logging.getLogger().level == logging.DEBUG

    treeforge_handlers = [h for h in logging.getLogger().handlers if is_treeforge_handler(h)]
    assert len(treeforge_handlers) == 1


def test_shutdown_removes_only_owned_handlers() -> None:
    """TC-02: Foreign handlers (e.g. pytest's) survive shutdown."""
    foreign = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(foreign)
    try:
        configure_logging(LoggingConfig(level="INFO"))
        shutdown_logging()

        assert foreign in root.handlers
        assert not any(is_treeforge_handler(h) for h in root.handlers)
    finally:
        root.removeHandler(foreign)


def test_log_rotation(tmp_path: Path) -> None:
    """TC-03: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    backup_file = tmp_path / "test_rotate.log.1"
    assert _wait_for(backup_file.exists), "Log rotation did not create a backup file."


def test_callback_handler_receives_records() -> None:
    """TC-04: Extra sinks receive formatted records through the listener."""
    received: List[str] = []
    configure_logging(
        LoggingConfig(level="INFO", console=False),
        extra_handlers=[CallbackHandler(received.append)],
    )

    logging.getLogger("treeforge.test").info("hello from the worker")
    logging.getLogger("treeforge.test").debug("hidden")

    assert _wait_for(lambda: any("hello from the worker" in r for r in received))
    assert not any("hidden" in r for r in received)
    assert received[0].startswith("INFO | ")


def test_get_recent_logs(tmp_path: Path) -> None:
    """TC-05: Tail of an existing file, notice for a missing one."""
    log_file = tmp_path / "app.log"
    log_file.write_text("".join(f"line {i}\n" for i in range(10)), encoding="utf-8")

    assert get_recent_logs(3, str(log_file)) == "line 7\nline 8\nline 9\n"
    assert get_recent_logs(3, str(tmp_path / "none.log")) == "Log file not found."
