from __future__ import annotations

"""
Apply Service.

Entry point used by the interface layers to materialize a structure. Wraps
the planner with request validation and folds the per-item outcomes into a
single ApplyResult, so callers never have to catch exceptions.
"""

import logging
from typing import Optional

from treeforge.core.execution.planner import (
    TARGET_UNAVAILABLE_MSG,
    execute_plan,
    is_preflight_failure,
    plan_execution,
)
from treeforge.core.tree.paths import flatten
from treeforge.domain.execution_models import (
    ApplyRequest,
    ApplyResult,
    create_error_result,
    create_success_result,
)
from treeforge.domain.node_models import Forest
from treeforge.infra.fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

TARGET_REQUIRED_MSG = "Target path is required"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def apply_request(
        request: ApplyRequest,
        fs: Optional[FileSystem] = None,
        *,
        max_workers: int = 1,
        timeout: Optional[float] = None,
        dry_run: bool = False,
) -> ApplyResult:
    """
    Materialize the items of a request under its target directory.

    Args:
        request: Target path plus flat items.
        fs: Filesystem capability (local disk when omitted).
        max_workers: Concurrency of the planner.
        timeout: Per-item timeout in seconds.
        dry_run: Simulate without touching the filesystem.

    Returns:
        ApplyResult: Request-level status and per-item outcomes.
    """
    target = (request.target_path or "").strip()
    if not target:
        logger.error("Apply rejected: no target path provided.")
        return create_error_result(TARGET_REQUIRED_MSG, request.target_path, dry_run=dry_run)

    fs = fs or LocalFileSystem()

    try:
        plan = plan_execution(request.items)
        logger.debug(f"Plan built: {len(plan)} item(s) for '{target}'.")

        results = execute_plan(
            target,
            plan,
            fs,
            max_workers=max_workers,
            timeout=timeout,
            dry_run=dry_run,
        )

        if is_preflight_failure(results, target):
            return create_error_result(
                f"{TARGET_UNAVAILABLE_MSG}: {target}",
                target,
                results=results,
                dry_run=dry_run,
            )

        return create_success_result(target, results, dry_run=dry_run)

    except Exception as e:
        logger.critical(f"Apply crashed: {e}", exc_info=True)
        return create_error_result(f"Unexpected error: {e}", target, dry_run=dry_run)


def apply_forest(
        forest: Forest,
        target_path: str,
        fs: Optional[FileSystem] = None,
        *,
        max_workers: int = 1,
        timeout: Optional[float] = None,
        dry_run: bool = False,
) -> ApplyResult:
    """Flatten the selected part of a forest and apply it to a target directory."""
    request = ApplyRequest(target_path=target_path, items=flatten(forest))
    return apply_request(
        request,
        fs,
        max_workers=max_workers,
        timeout=timeout,
        dry_run=dry_run,
    )
