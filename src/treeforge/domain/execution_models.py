from __future__ import annotations

"""
Execution Domain Data Models.

Defines the flat items handed to the execution planner, the per-item
outcomes it produces, and the request/result envelopes exchanged with the
interface layers (CLI/GUI).
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from treeforge.domain.node_models import NodeKind

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecutionItem:
    """
    A (path, kind) pair slated for filesystem materialization.

    Attributes:
        path: Slash-separated path relative to the target root.
        kind: File or Directory.
    """
    path: str
    kind: NodeKind


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of a single execution item.

    Attributes:
        success: Whether the filesystem calls for the item completed.
        path: Absolute path that was (or would have been) created.
        kind: Kind of the item.
        message: Failure reason or informational note.
    """
    success: bool
    path: str
    kind: NodeKind
    message: Optional[str] = None


@dataclass(frozen=True)
class ApplyRequest:
    """
    Materialization request coming from an interface layer.

    Attributes:
        target_path: Existing directory under which items are created.
        items: Flat items, in any order.
    """
    target_path: str
    items: List[ExecutionItem] = field(default_factory=list)


@dataclass(frozen=True)
class ApplyResult:
    """
    Unified result of an apply request.

    `ok` is False only for request-level failures (empty or inaccessible
    target, unexpected internal error). Per-item failures keep `ok` True and
    are visible through `failed` and the individual results.

    Attributes:
        ok: Request-level status.
        error: Request-level error description.
        target_path: Target directory as received.
        results: Per-item outcomes in plan order.
        succeeded: Count of successful results.
        failed: Count of failed results.
        dry_run: Whether the run was simulated.
    """
    ok: bool
    error: str
    target_path: str
    results: List[ExecutionResult] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    dry_run: bool = False

    @property
    def all_succeeded(self) -> bool:
        return self.ok and self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into JSON-compatible primitives."""
        data = asdict(self)
        for res in data["results"]:
            res["kind"] = NodeKind(res["kind"]).value
        data["all_succeeded"] = self.all_succeeded
        return data

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        target_path: str,
        results: Optional[List[ExecutionResult]] = None,
        dry_run: bool = False,
) -> ApplyResult:
    """
    Create a request-level failure.

    Args:
        error: Detailed error description.
        target_path: The requested target directory.
        results: Optional synthetic results (e.g. the target failure entry).
        dry_run: Whether the run was simulated.

    Returns:
        ApplyResult: An immutable error result object.
    """
    res = list(results or [])
    return ApplyResult(
        ok=False,
        error=error,
        target_path=target_path,
        results=res,
        succeeded=sum(1 for r in res if r.success),
        failed=sum(1 for r in res if not r.success),
        dry_run=dry_run,
    )


def create_success_result(
        target_path: str,
        results: List[ExecutionResult],
        dry_run: bool = False,
) -> ApplyResult:
    """
    Create a completed apply result, counting per-item outcomes.

    Args:
        target_path: The requested target directory.
        results: Per-item outcomes in plan order.
        dry_run: Whether the run was simulated.

    Returns:
        ApplyResult: An immutable result object.
    """
    succeeded = sum(1 for r in results if r.success)
    return ApplyResult(
        ok=True,
        error="",
        target_path=target_path,
        results=list(results),
        succeeded=succeeded,
        failed=len(results) - succeeded,
        dry_run=dry_run,
    )
