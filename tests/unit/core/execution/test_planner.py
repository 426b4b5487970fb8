from __future__ import annotations

"""
Unit tests for the Execution Planner.

Verifies:
1. Directories-before-files ordering (stable within each kind).
2. Per-item failure isolation and plan-ordered results.
3. Pre-flight target check (no mutating calls on failure).
4. Dry-run, path confinement and timeout handling.
5. Abandoned calls never block interpreter exit.
"""

import os
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path
from typing import List

import pytest

from treeforge.core.execution.planner import (
    DRY_RUN_MSG,
    TARGET_UNAVAILABLE_MSG,
    execute_plan,
    is_preflight_failure,
    plan_execution,
)
from treeforge.domain.execution_models import ExecutionItem
from treeforge.domain.node_models import NodeKind

ROOT = os.path.join(os.sep, "target")
SRC_DIR = Path(__file__).resolve().parents[4] / "src"

D = NodeKind.DIRECTORY
F = NodeKind.FILE


def items(*pairs) -> List[ExecutionItem]:
    return [ExecutionItem(path=p, kind=k) for p, k in pairs]


def under_root(*parts: str) -> str:
    return os.path.join(ROOT, *parts)


# -----------------------------------------------------------------------------
# Ordering
# -----------------------------------------------------------------------------
def test_plan_puts_directories_first_and_is_stable() -> None:
    """TC-01: Stable partition by kind."""
    plan = plan_execution(items(
        ("a/x.txt", F), ("a", D), ("b/y.txt", F), ("b", D), ("a/c", D),
    ))

    assert [i.path for i in plan] == ["a", "b", "a/c", "a/x.txt", "b/y.txt"]


def test_plan_of_empty_input() -> None:
    assert plan_execution([]) == []


# -----------------------------------------------------------------------------
# Execution
# -----------------------------------------------------------------------------
def test_execute_creates_directories_and_files(recording_fs) -> None:
    """TC-02: Directories are created recursively; files get their parent first."""
    plan = items(("app", D), ("app/src/index.ts", F))
    results = execute_plan(ROOT, plan, recording_fs)

    assert all(r.success for r in results)
    assert [r.path for r in results] == [under_root("app"), under_root("app", "src", "index.ts")]
    assert recording_fs.mutating_calls() == [
        ("mkdir", under_root("app")),
        ("mkdir", under_root("app", "src")),
        ("touch", under_root("app", "src", "index.ts")),
    ]


def test_partial_failure_does_not_stop_later_items(recording_fs) -> None:
    """TC-03: The second item fails, the first and third still succeed."""
    recording_fs.fail_on.add(under_root("b"))
    plan = items(("a", D), ("b", D), ("c", D))

    results = execute_plan(ROOT, plan, recording_fs)

    assert [r.success for r in results] == [True, False, True]
    assert "Permission denied" in results[1].message
    assert results[1].path == under_root("b")
    assert ("mkdir", under_root("c")) in recording_fs.mutating_calls()


def test_preflight_failure_touches_nothing(recording_fs) -> None:
    """TC-04: A missing target yields one synthetic failure and zero mutations."""
    recording_fs.target_exists = False
    results = execute_plan(ROOT, items(("a", D), ("a/b.txt", F)), recording_fs)

    assert len(results) == 1
    assert results[0].success is False
    assert results[0].path == ROOT
    assert results[0].kind == NodeKind.DIRECTORY
    assert results[0].message == TARGET_UNAVAILABLE_MSG
    assert recording_fs.mutating_calls() == []
    assert is_preflight_failure(results, ROOT)


def test_preflight_rejects_non_directory_target(recording_fs) -> None:
    recording_fs.target_is_dir = False
    results = execute_plan(ROOT, items(("a", D)), recording_fs)
    assert is_preflight_failure(results, ROOT)


def test_empty_plan_with_valid_target(recording_fs) -> None:
    """TC-05: Nothing to do is not an error."""
    assert execute_plan(ROOT, [], recording_fs) == []


def test_is_preflight_failure_ignores_item_failures(recording_fs) -> None:
    recording_fs.fail_on.add(under_root("a"))
    results = execute_plan(ROOT, items(("a", D)), recording_fs)
    assert not is_preflight_failure(results, ROOT)


def test_dry_run_resolves_without_mutations(recording_fs) -> None:
    """TC-06: Dry runs report each resolved path and call no mutating method."""
    results = execute_plan(ROOT, items(("a", D), ("a/b.txt", F)), recording_fs, dry_run=True)

    assert [r.path for r in results] == [under_root("a"), under_root("a", "b.txt")]
    assert all(r.success and r.message == DRY_RUN_MSG for r in results)
    assert recording_fs.mutating_calls() == []


@pytest.mark.parametrize("bad_path", ["../escape", "a/../../b", "/etc/passwd", ""])
def test_paths_escaping_the_target_are_rejected(recording_fs, bad_path: str) -> None:
    """TC-07: Traversal and absolute paths fail without filesystem calls."""
    results = execute_plan(ROOT, items((bad_path, D), ("ok", D)), recording_fs)

    assert results[0].success is False
    assert results[0].path == bad_path
    assert results[1].success is True
    assert recording_fs.mutating_calls() == [("mkdir", under_root("ok"))]


def test_unexpected_exception_is_captured(recording_fs) -> None:
    """TC-08: Non-OSError exceptions become item failures too."""
    def boom(path: str) -> None:
        raise RuntimeError("boom")

    recording_fs.create_empty_file = boom
    results = execute_plan(ROOT, items(("a.txt", F), ("b", D)), recording_fs)

    assert results[0].success is False
    assert results[0].message == "Unexpected error: boom"
    assert results[1].success is True


def test_parallel_execution_keeps_plan_order(recording_fs) -> None:
    """TC-09: With several workers results still mirror the plan."""
    plan = items(*[(f"dir{i}", D) for i in range(20)])
    results = execute_plan(ROOT, plan, recording_fs, max_workers=4)

    assert [r.path for r in results] == [under_root(f"dir{i}") for i in range(20)]
    assert all(r.success for r in results)


def test_hung_item_times_out_and_later_items_run(recording_fs) -> None:
    """TC-10: A blocked call is reported as a timeout; the next item still runs."""
    release = threading.Event()
    original_touch = recording_fs.create_empty_file

    def slow_touch(path: str) -> None:
        if path.endswith("slow.txt"):
            release.wait(5)
        original_touch(path)

    recording_fs.create_empty_file = slow_touch
    plan = items(("a", D), ("a/slow.txt", F), ("a/fast.txt", F))

    try:
        results = execute_plan(ROOT, plan, recording_fs, max_workers=1, timeout=0.2)
    finally:
        release.set()

    assert [r.success for r in results] == [True, False, True]
    assert results[1].message == "Timed out after 0.2 seconds"
    assert results[1].path == under_root("a", "slow.txt")


HUNG_CALL_SCRIPT = textwrap.dedent("""
    import time

    from treeforge.core.execution.planner import execute_plan
    from treeforge.domain.execution_models import ExecutionItem
    from treeforge.domain.node_models import NodeKind


    class SlowFileSystem:
        def exists(self, path):
            return True

        def is_directory(self, path):
            return True

        def create_directory_recursive(self, path):
            if path.endswith("slow"):
                time.sleep(10)

        def create_empty_file(self, path):
            pass


    plan = [
        ExecutionItem(path="slow", kind=NodeKind.DIRECTORY),
        ExecutionItem(path="fast", kind=NodeKind.DIRECTORY),
    ]
    results = execute_plan("/target", plan, SlowFileSystem(), timeout=0.2)
    print([r.success for r in results])
""")


def test_hung_item_does_not_delay_process_exit() -> None:
    """TC-11: An abandoned call never keeps the interpreter alive."""
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    started = time.monotonic()
    result = subprocess.run(
        [sys.executable, "-c", HUNG_CALL_SCRIPT],
        env=env,
        capture_output=True,
        text=True,
        timeout=30,
    )
    elapsed = time.monotonic() - started

    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "[False, True]"
    assert elapsed < 5
