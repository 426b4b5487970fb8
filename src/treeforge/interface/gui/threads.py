from __future__ import annotations

"""
Background Worker Threads for GUI Operations.

Runs the apply step away from the Tk event loop. Results (or the exception
that escaped) are handed to a callback, which is responsible for marshalling
back onto the GUI thread.
"""

import logging
from typing import Any, Callable, Dict

from treeforge.core.execution.service import apply_forest
from treeforge.domain.node_models import Forest

logger = logging.getLogger(__name__)


def run_apply_task(
        forest: Forest,
        target_path: str,
        settings: Dict[str, Any],
        on_complete: Callable[[Any], None],
) -> None:
    """
    Materialize a forest in a dedicated background thread.

    Args:
        forest: Immutable forest snapshot taken when the run started.
        target_path: Existing target directory.
        settings: Validated execution settings (max_workers, timeout_seconds, dry_run).
        on_complete: Receives the ApplyResult, or the exception on a crash.
    """
    try:
        result = apply_forest(
            forest,
            target_path,
            max_workers=settings.get("max_workers", 1),
            timeout=settings.get("timeout_seconds"),
            dry_run=bool(settings.get("dry_run", False)),
        )
        on_complete(result)
    except Exception as e:
        logger.critical(f"Apply Thread: Critical failure detected: {e}", exc_info=True)
        on_complete(e)
