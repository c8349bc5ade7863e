"""Preview -> confirm -> commit workflow for mutating operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from bsnmgr.errors import ExecutorError, ExecutorFailure
from bsnmgr.models import BulkCommitResult, ExecutionReport, Item, ItemOutcome
from bsnmgr.util.logging import get_logger

from .gate import ConfirmationGate, GateDecision, PendingAction

logger = get_logger(__name__)


class CommitKind(str, Enum):
    """How the commit step reports its result."""

    BULK = "BULK"  # one call, returns BulkCommitResult with per-item outcomes
    SINGLE = "SINGLE"  # one target, returns bool or None


@dataclass(slots=True)
class OperationSpec:
    """
    One mutating operation.

    preview: Read-only call returning the affected items (a sequence, a
        single item, or None for "nothing matched"). Entries may be Item or
        any model with a to_item() method.
    commit: Call performing the mutation.
    """

    name: str
    preview: Callable[[], Any]
    commit: Callable[[], Any]
    action: PendingAction
    kind: CommitKind = CommitKind.SINGLE
    dry_run: bool = False
    failure_message: str = "Operation reported failure"


class OperationExecutor:
    """Run preview -> (dry run) -> confirm -> commit -> report."""

    def __init__(self, gate: ConfirmationGate) -> None:
        self._gate = gate

    def execute(self, op: OperationSpec) -> ExecutionReport:
        """
        Run `op` and return its report.

        The report status is one of "empty", "dry_run", "cancelled" or
        "committed". Per-item failures of a committed run are in
        report.failures and are not raised.

        Raises:
            ExecutorError: PREVIEW_FAILED / COMMIT_FAILED when the collaborator
                call itself fails.
            GateError: when confirmation cannot be obtained.
        """
        try:
            preview = _as_preview_set(op.preview())
        except Exception as exc:
            logger.error("preview_failed", operation=op.name, error=str(exc))
            raise ExecutorError(
                f"Failed to preview {op.name}",
                reason=ExecutorFailure.PREVIEW_FAILED,
                cause=exc,
            ) from exc

        logger.info("preview_complete", operation=op.name, items=len(preview))

        if not preview:
            return ExecutionReport(status="empty")

        if op.kind is CommitKind.SINGLE and len(preview) > 1:
            raise ExecutorError(
                f"{op.name} expects a single target but preview returned {len(preview)} items",
                reason=ExecutorFailure.PREVIEW_FAILED,
                details={"items": len(preview)},
            )

        if op.dry_run:
            logger.info("dry_run_complete", operation=op.name, items=len(preview))
            return ExecutionReport(status="dry_run", preview=preview)

        decision = self._gate.confirm(op.action.with_item_count(len(preview)))
        if decision is GateDecision.CANCELLED:
            return ExecutionReport(status="cancelled", preview=preview)

        try:
            result = op.commit()
        except Exception as exc:
            logger.error("commit_failed", operation=op.name, error=str(exc))
            raise ExecutorError(
                f"Failed to commit {op.name}",
                reason=ExecutorFailure.COMMIT_FAILED,
                cause=exc,
            ) from exc

        outcomes = _normalize(op, preview, result)
        report = ExecutionReport(status="committed", preview=preview, outcomes=outcomes)
        logger.info(
            "commit_complete",
            operation=op.name,
            attempted=report.attempted_count,
            failed=len(report.failures),
        )
        return report


def _as_preview_set(raw: Any) -> list[Item]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [_as_item(entry) for entry in raw]
    return [_as_item(raw)]


def _as_item(entry: Any) -> Item:
    if isinstance(entry, Item):
        return entry
    to_item = getattr(entry, "to_item", None)
    if callable(to_item):
        return to_item()
    raise TypeError(f"Preview entry is not an Item: {type(entry).__name__}")


def _normalize(op: OperationSpec, preview: list[Item], result: Any) -> list[ItemOutcome]:
    if isinstance(result, BulkCommitResult):
        return result.outcomes()

    if op.kind is CommitKind.BULK:
        raise ExecutorError(
            f"{op.name} commit did not return a bulk result",
            reason=ExecutorFailure.COMMIT_FAILED,
            details={"result_type": type(result).__name__},
        )

    target = preview[0].item_id
    if result is False:
        return [ItemOutcome.failed(target, op.failure_message)]
    return [ItemOutcome.succeeded(target)]
