import unittest

from bsnmgr.errors import ApiError, ExecutorError, ExecutorFailure, GateError
from bsnmgr.models import BulkCommitResult, ContentFile, Item, ItemFailure
from bsnmgr.session import (
    CommitKind,
    ConfirmationGate,
    OperationExecutor,
    OperationSpec,
    PendingAction,
)


class ScriptedConsole:
    def __init__(self, *lines) -> None:
        self.lines = list(lines)
        self.output = []
        self.reads = 0

    def write(self, text: str) -> None:
        self.output.append(text)

    def read_line(self):
        self.reads += 1
        if not self.lines:
            return None
        return self.lines.pop(0)


class FakeApi:
    """Records preview/commit calls and returns canned results."""

    def __init__(self, preview=None, commit=None, preview_error=None, commit_error=None) -> None:
        self.preview_result = preview
        self.commit_result = commit
        self.preview_error = preview_error
        self.commit_error = commit_error
        self.calls = []

    def preview(self):
        self.calls.append("preview")
        if self.preview_error is not None:
            raise self.preview_error
        return self.preview_result

    def commit(self):
        self.calls.append("commit")
        if self.commit_error is not None:
            raise self.commit_error
        return self.commit_result


THREE_FILES = [
    ContentFile(content_id=10, name="a"),
    ContentFile(content_id=11, name="b"),
    ContentFile(content_id=12, name="c"),
]


class TestOperationExecutor(unittest.TestCase):
    def _run(self, api, *answers, kind=CommitKind.BULK, dry_run=False, force=False, non_interactive=False):
        self.console = ScriptedConsole(*answers)
        executor = OperationExecutor(ConfirmationGate(self.console))
        return executor.execute(
            OperationSpec(
                name="delete",
                preview=api.preview,
                commit=api.commit,
                action=PendingAction("delete", force_bypass=force, non_interactive=non_interactive),
                kind=kind,
                dry_run=dry_run,
            )
        )

    def test_bulk_partial_failure_is_reported(self) -> None:
        api = FakeApi(
            preview=THREE_FILES,
            commit=BulkCommitResult(
                succeeded_ids=[10, 11],
                failures=[ItemFailure(item_ref=12, message="locked")],
            ),
        )
        report = self._run(api, force=True)

        self.assertEqual(report.status, "committed")
        self.assertEqual(report.attempted_count, 3)
        self.assertEqual(report.succeeded_ids, {10, 11})
        self.assertEqual(report.failures, [ItemFailure(item_ref=12, message="locked")])
        self.assertEqual([i.item_id for i in report.preview], [10, 11, 12])

    def test_confirmed_run_commits(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit=BulkCommitResult(succeeded_ids=[10, 11, 12]))
        report = self._run(api, "yes")
        self.assertEqual(api.calls, ["preview", "commit"])
        self.assertEqual(report.succeeded_count, 3)
        self.assertIn("(3 items)", "".join(self.console.output))

    def test_declined_confirmation_cancels(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit=BulkCommitResult())
        report = self._run(api, "No")
        self.assertEqual(report.status, "cancelled")
        self.assertEqual(report.attempted_count, 0)
        self.assertEqual(api.calls, ["preview"])

    def test_dry_run_never_commits(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit=BulkCommitResult())
        report = self._run(api, "yes", dry_run=True, force=True)
        self.assertEqual(report.status, "dry_run")
        self.assertEqual(len(report.preview), 3)
        self.assertEqual(report.attempted_count, 0)
        self.assertEqual(api.calls, ["preview"])
        self.assertEqual(self.console.reads, 0)

    def test_empty_preview_is_done(self) -> None:
        for preview in (None, [], ()):
            for dry_run in (False, True):
                with self.subTest(preview=preview, dry_run=dry_run):
                    api = FakeApi(preview=preview)
                    report = self._run(api, dry_run=dry_run)
                    self.assertEqual(report.status, "empty")
                    self.assertEqual(report.attempted_count, 0)
                    self.assertEqual(api.calls, ["preview"])
                    self.assertEqual(self.console.reads, 0)

    def test_preview_failure(self) -> None:
        api = FakeApi(preview_error=ApiError("down"))
        with self.assertRaises(ExecutorError) as ctx:
            self._run(api, force=True)
        self.assertIs(ctx.exception.reason, ExecutorFailure.PREVIEW_FAILED)
        self.assertIsInstance(ctx.exception.cause, ApiError)

    def test_malformed_preview_is_preview_failure(self) -> None:
        api = FakeApi(preview=[object()])
        with self.assertRaises(ExecutorError) as ctx:
            self._run(api, force=True)
        self.assertIs(ctx.exception.reason, ExecutorFailure.PREVIEW_FAILED)
        self.assertIsInstance(ctx.exception.cause, TypeError)
        self.assertEqual(api.calls, ["preview"])

    def test_commit_failure(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit_error=ApiError("down"))
        with self.assertRaises(ExecutorError) as ctx:
            self._run(api, force=True)
        self.assertIs(ctx.exception.reason, ExecutorFailure.COMMIT_FAILED)

    def test_bulk_commit_must_return_bulk_result(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit=None)
        with self.assertRaises(ExecutorError) as ctx:
            self._run(api, force=True)
        self.assertIs(ctx.exception.reason, ExecutorFailure.COMMIT_FAILED)

    def test_gate_error_propagates_without_commit(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit=BulkCommitResult())
        with self.assertRaises(GateError):
            self._run(api, non_interactive=True)
        self.assertEqual(api.calls, ["preview"])

    def test_single_commit_outcomes(self) -> None:
        target = Item(item_id="sd/a.txt", name="a.txt")

        report = self._run(FakeApi(preview=target, commit=None), kind=CommitKind.SINGLE, force=True)
        self.assertEqual(report.succeeded_ids, {"sd/a.txt"})

        report = self._run(FakeApi(preview=target, commit=True), kind=CommitKind.SINGLE, force=True)
        self.assertEqual(report.succeeded_count, 1)

        report = self._run(FakeApi(preview=target, commit=False), kind=CommitKind.SINGLE, force=True)
        self.assertEqual(report.attempted_count, 1)
        self.assertEqual(report.failures[0].item_ref, "sd/a.txt")
        self.assertEqual(report.failures[0].message, "Operation reported failure")

    def test_single_kind_rejects_multiple_targets(self) -> None:
        api = FakeApi(preview=THREE_FILES, commit=True)
        with self.assertRaises(ExecutorError) as ctx:
            self._run(api, kind=CommitKind.SINGLE, force=True)
        self.assertIs(ctx.exception.reason, ExecutorFailure.PREVIEW_FAILED)
        self.assertEqual(api.calls, ["preview"])


if __name__ == "__main__":
    unittest.main()
