from __future__ import annotations

"""
Execution Planner.

Orders flat execution items (directories before files) and materializes
them through an injected filesystem capability. Every item is attempted
independently: one failure never aborts or skips the rest, and the result
list always mirrors the plan order.
"""

import logging
import os
import queue
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Deque, Iterable, List, Optional, Tuple

from treeforge.domain.execution_models import ExecutionItem, ExecutionResult
from treeforge.domain.node_models import NodeKind
from treeforge.infra.fs import FileSystem, resolve_inside

logger = logging.getLogger(__name__)

TARGET_UNAVAILABLE_MSG = "Target directory does not exist or is not accessible"
DRY_RUN_MSG = "Dry run: nothing was created"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def plan_execution(items: Iterable[ExecutionItem]) -> List[ExecutionItem]:
    """
    Stable-sort items so that every directory precedes every file.

    Relative order inside each kind is preserved.

    Args:
        items: Flat items in any order.

    Returns:
        List[ExecutionItem]: The ordered plan.
    """
    return sorted(items, key=lambda item: item.kind != NodeKind.DIRECTORY)


def execute_plan(
        target_root: str,
        plan: List[ExecutionItem],
        fs: FileSystem,
        *,
        max_workers: int = 1,
        timeout: Optional[float] = None,
        dry_run: bool = False,
) -> List[ExecutionResult]:
    """
    Materialize a plan under a target directory.

    A pre-flight check on the target runs first; when it fails the call
    returns one synthetic failure for the target and touches nothing.

    Args:
        target_root: Existing directory receiving the items.
        plan: Ordered items, usually from plan_execution.
        fs: Filesystem capability.
        max_workers: Items processed concurrently; 1 runs sequentially.
        timeout: Seconds allowed per item before it is reported as failed.
        dry_run: Resolve and report without creating anything.

    Returns:
        List[ExecutionResult]: One result per plan item, in plan order.
    """
    if not _target_available(target_root, fs):
        logger.error(f"Execution aborted: target unavailable '{target_root}'.")
        return [
            ExecutionResult(
                success=False,
                path=target_root,
                kind=NodeKind.DIRECTORY,
                message=TARGET_UNAVAILABLE_MSG,
            )
        ]

    logger.info(
        f"Executing {len(plan)} item(s) in '{target_root}'"
        f"{' (dry run)' if dry_run else ''} with {max(1, max_workers)} worker(s)."
    )

    def task(item: ExecutionItem) -> Callable[[], ExecutionResult]:
        return lambda: _execute_item(target_root, item, fs, dry_run)

    if timeout is not None:
        results = _execute_with_deadline(plan, task, max(1, max_workers), timeout, target_root)
    elif max_workers > 1:
        results = _execute_with_pool(plan, task, max_workers)
    else:
        results = [task(item)() for item in plan]

    failed = sum(1 for r in results if not r.success)
    if failed:
        logger.warning(f"Execution finished with {failed} failure(s) out of {len(results)} item(s).")
    else:
        logger.info(f"Execution finished: {len(results)} item(s) succeeded.")
    return results


def is_preflight_failure(results: List[ExecutionResult], target_root: str) -> bool:
    """Tell whether execute_plan stopped at the target check."""
    return (
        len(results) == 1
        and not results[0].success
        and results[0].path == target_root
        and results[0].message == TARGET_UNAVAILABLE_MSG
    )

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _target_available(target_root: str, fs: FileSystem) -> bool:
    if not (target_root or "").strip():
        return False
    try:
        return bool(fs.exists(target_root)) and bool(fs.is_directory(target_root))
    except OSError as e:
        logger.debug(f"Target pre-flight failed for '{target_root}': {e}")
        return False


def _execute_item(target_root: str, item: ExecutionItem, fs: FileSystem, dry_run: bool) -> ExecutionResult:
    """Run the filesystem calls of a single item and capture the outcome."""
    full_path, error = resolve_inside(target_root, item.path)
    if full_path is None:
        logger.warning(f"Item rejected: {error}")
        return ExecutionResult(success=False, path=item.path, kind=item.kind, message=error)

    if dry_run:
        return ExecutionResult(success=True, path=full_path, kind=item.kind, message=DRY_RUN_MSG)

    try:
        if item.kind == NodeKind.DIRECTORY:
            fs.create_directory_recursive(full_path)
        else:
            fs.create_directory_recursive(os.path.dirname(full_path))
            fs.create_empty_file(full_path)
        logger.debug(f"Created {item.kind.value}: {full_path}")
        return ExecutionResult(success=True, path=full_path, kind=item.kind)

    except OSError as e:
        logger.warning(f"Failed to create {item.kind.value} '{full_path}': {e}")
        return ExecutionResult(success=False, path=full_path, kind=item.kind, message=str(e) or type(e).__name__)
    except Exception as e:
        logger.error(f"Unexpected error creating '{full_path}': {e}", exc_info=True)
        return ExecutionResult(
            success=False,
            path=full_path,
            kind=item.kind,
            message=f"Unexpected error: {e}",
        )


def _execute_with_pool(
        plan: List[ExecutionItem],
        task: Callable[[ExecutionItem], Callable[[], ExecutionResult]],
        max_workers: int,
) -> List[ExecutionResult]:
    """Dispatch items on a thread pool and collect results in plan order."""
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="treeforge-exec") as executor:
        futures = [executor.submit(task(item)) for item in plan]
        return [future.result() for future in futures]


def _execute_with_deadline(
        plan: List[ExecutionItem],
        task: Callable[[ExecutionItem], Callable[[], ExecutionResult]],
        max_workers: int,
        timeout: float,
        target_root: str,
) -> List[ExecutionResult]:
    """
    Run every item on its own daemon thread, waiting at most `timeout` for each.

    At most max_workers items are awaited at once and results are collected
    in plan order. An item that overruns is reported as a timeout failure and
    its thread is abandoned; daemon threads never delay interpreter exit.
    """
    results: List[ExecutionResult] = []
    in_flight: Deque[Tuple[ExecutionItem, "queue.Queue[ExecutionResult]"]] = deque()

    for item in plan:
        in_flight.append((item, _start_daemon(task(item))))
        if len(in_flight) >= max_workers:
            results.append(_await_result(*in_flight.popleft(), timeout, target_root))

    while in_flight:
        results.append(_await_result(*in_flight.popleft(), timeout, target_root))
    return results


def _start_daemon(job: Callable[[], ExecutionResult]) -> "queue.Queue[ExecutionResult]":
    outcome: "queue.Queue[ExecutionResult]" = queue.Queue(maxsize=1)
    threading.Thread(target=lambda: outcome.put(job()), name="treeforge-exec", daemon=True).start()
    return outcome


def _await_result(
        item: ExecutionItem,
        outcome: "queue.Queue[ExecutionResult]",
        timeout: float,
        target_root: str,
) -> ExecutionResult:
    try:
        return outcome.get(timeout=timeout)
    except queue.Empty:
        full_path, _ = resolve_inside(target_root, item.path)
        logger.warning(f"Timed out after {timeout}s creating '{item.path}'.")
        return ExecutionResult(
            success=False,
            path=full_path or item.path,
            kind=item.kind,
            message=f"Timed out after {timeout} seconds",
        )
