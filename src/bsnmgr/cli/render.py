"""Text / JSON presentation for the console tools."""

from __future__ import annotations

import dataclasses
import json
import sys
from datetime import datetime
from typing import Any, Iterable, Optional, TextIO

from bsnmgr.errors import BsnMgrError
from bsnmgr.models import ExecutionReport, Item
from bsnmgr.util.format import format_file_size

RULE = "=" * 80


def to_jsonable(value: Any) -> Any:
    """Convert models (dataclasses, datetimes, sets) into JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [to_jsonable(v) for v in value]
        if isinstance(value, (set, frozenset)):
            items.sort(key=str)
        return items
    return value


class Presenter:
    """
    Writes tool results to stdout.

    In JSON mode only JSON documents go to stdout; human-oriented lines are
    suppressed. Errors always go to stderr.
    """

    def __init__(
        self,
        *,
        json_mode: bool = False,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.json_mode = json_mode
        self._stdout = stdout
        self._stderr = stderr

    @property
    def out(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr or sys.stderr

    def line(self, text: str = "") -> None:
        """Print a human-readable line (text mode only)."""
        if not self.json_mode:
            print(text, file=self.out)

    def emit(self, data: Any) -> None:
        """Print a JSON document (JSON mode only)."""
        if self.json_mode:
            print(json.dumps(to_jsonable(data), indent=2), file=self.out)

    def error(self, exc: BaseException) -> None:
        print(f"Error: {exc}", file=self.err)
        if isinstance(exc, BsnMgrError):
            reason = getattr(exc, "reason", None)
            if reason is not None:
                print(f"  reason: {reason.value}", file=self.err)
            hint = exc.details.get("hint")
            if hint:
                print(f"  hint: {hint}", file=self.err)

    def items(self, items: Iterable[Item]) -> None:
        for i, item in enumerate(items, start=1):
            self.line(f"[{i}] {item.name} (ID: {item.item_id})")
            if item.type:
                self.line(f"    Type: {item.type}")
            if item.size:
                self.line(f"    Size: {format_file_size(item.size)}")
            if item.path and item.path != item.item_id:
                self.line(f"    Path: {item.path}")

    def report(self, report: ExecutionReport, *, noun: str = "items") -> int:
        """
        Present an execution report and return the exit code.

        Cancelled and empty runs are successes (exit 0), as is a committed run
        where at least one item succeeded. A committed run where every
        attempted item failed exits 1.
        """
        code = 1 if report.committed and report.failures and report.succeeded_count == 0 else 0

        if self.json_mode:
            self.emit(
                {
                    "status": report.status,
                    "preview": report.preview,
                    "attempted": report.attempted_count,
                    "succeeded": report.succeeded_count,
                    "succeeded_ids": report.succeeded_ids,
                    "failures": report.failures,
                }
            )
            return code

        if report.status == "empty":
            self.line(f"No {noun} match.")
            return 0

        if report.status == "dry_run":
            self.line(f"\nDRY RUN: the following {noun} would be affected:")
            self.line(RULE)
            self.items(report.preview)
            self.line(f"\nTotal: {len(report.preview)} {noun}")
            self.line("Dry run complete. Nothing was changed.")
            return 0

        if report.status == "cancelled":
            self.line("Operation cancelled.")
            return 0

        self.line("\nResults:")
        self.line(RULE)
        self.line(f"Attempted: {report.attempted_count}")
        self.line(f"Succeeded: {report.succeeded_count}")
        if report.failures:
            self.line("\nErrors encountered:")
            for failure in report.failures:
                ref = "" if failure.item_ref is None else f"[{failure.item_ref}] "
                self.line(f"  - {ref}{failure.message}")
        else:
            self.line("\nCompleted successfully.")
        return code
