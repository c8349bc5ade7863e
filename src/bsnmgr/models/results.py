"""Result models for preview/commit workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from .items import Item, ItemRef

OutcomeStatus = Literal["succeeded", "failed"]
ReportStatus = Literal["empty", "dry_run", "cancelled", "committed"]


@dataclass(slots=True, frozen=True)
class ItemFailure:
    """A per-item failure reported by a commit call."""

    item_ref: Optional[ItemRef]
    message: str


@dataclass(slots=True, frozen=True)
class ItemOutcome:
    """Tagged outcome for a single attempted item."""

    item_ref: Optional[ItemRef]
    status: OutcomeStatus
    message: Optional[str] = None

    @classmethod
    def succeeded(cls, item_ref: ItemRef) -> "ItemOutcome":
        return cls(item_ref=item_ref, status="succeeded")

    @classmethod
    def failed(cls, item_ref: Optional[ItemRef], message: str) -> "ItemOutcome":
        return cls(item_ref=item_ref, status="failed", message=message)


@dataclass(slots=True)
class BulkCommitResult:
    """Mixed result of one bulk API call (some items succeeded, some failed)."""

    succeeded_ids: list[ItemRef] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)

    def outcomes(self) -> list[ItemOutcome]:
        result = [ItemOutcome.succeeded(ref) for ref in self.succeeded_ids]
        result.extend(ItemOutcome.failed(f.item_ref, f.message) for f in self.failures)
        return result


@dataclass(slots=True)
class ExecutionReport:
    """
    Aggregate result of one preview/confirm/commit run.

    Counts are derived from `outcomes`, so
    attempted_count == len(succeeded_ids) + len(failures) always holds.
    """

    status: ReportStatus
    preview: list[Item] = field(default_factory=list)
    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def attempted_count(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded_ids(self) -> set[ItemRef]:
        return {
            o.item_ref
            for o in self.outcomes
            if o.status == "succeeded" and o.item_ref is not None
        }

    @property
    def failures(self) -> list[ItemFailure]:
        return [
            ItemFailure(item_ref=o.item_ref, message=o.message or "")
            for o in self.outcomes
            if o.status == "failed"
        ]

    @property
    def succeeded_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "succeeded")

    @property
    def committed(self) -> bool:
        return self.status == "committed"
