from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from terrax import cli
from terrax.columns import NavigationResult
from terrax.history import ExecutionLogEntry, FileRepository
from terrax.plan import PlanReport, ResourceChange, StackResult, StackStats


def _make_stack(root: Path, relative: str) -> Path:
    directory = root / relative
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "terragrunt.hcl").write_text("", encoding="utf-8")
    return directory


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name).resolve()
        self.project = self.tmp / "infra"
        self.project.mkdir()
        (self.project / "root.hcl").write_text("", encoding="utf-8")
        self.history_path = self.tmp / "config" / "history.log"
        for patcher in (
            mock.patch("terrax.runtime.config.CONFIG_PATH", self.tmp / "config" / "config.json"),
            mock.patch("terrax.cli.history_file_path", return_value=self.history_path),
            mock.patch("terrax.cli._require_tty"),
            mock.patch("terrax.cli._configure_logging"),
        ):
            patcher.start()
            self.addCleanup(patcher.stop)

    def _run(self, argv: list[str]) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            cli.main(argv, cwd=self.project)
        return out.getvalue()

    def _record(self, entry_id: int, absolute_path: Path, command: str = "plan") -> ExecutionLogEntry:
        entry = ExecutionLogEntry(
            id=entry_id,
            timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            user="dev",
            stack_path="live",
            absolute_path=str(absolute_path),
            command=command,
            exit_code=0,
        )
        FileRepository(self.history_path).append(entry)
        return entry

    def test_interactive_confirm_runs_selected_command(self) -> None:
        stack = _make_stack(self.project, "live/app")
        result = NavigationResult(confirmed=True, command="apply", stack_path=stack)
        with mock.patch("terrax.cli.run_navigation_session", return_value=result) as session, mock.patch(
            "terrax.cli.run_command", return_value=0
        ) as run_command:
            output = self._run([])

        tree = session.call_args.args[0]
        self.assertEqual(tree.max_depth, 2)
        self.assertEqual(session.call_args.args[1][0], "plan")
        self.assertEqual(session.call_args.args[2], 3)
        self.assertIn("Selection confirmed", output)
        self.assertEqual(run_command.call_args.args[2:], ("apply", stack))

    def test_interactive_cancel_does_not_execute(self) -> None:
        _make_stack(self.project, "app")
        result = NavigationResult(confirmed=False, command="plan")
        with mock.patch("terrax.cli.run_navigation_session", return_value=result), mock.patch(
            "terrax.cli.run_command"
        ) as run_command:
            output = self._run([])

        self.assertIn("Selection cancelled", output)
        run_command.assert_not_called()

    def test_nonzero_exit_code_becomes_process_exit(self) -> None:
        stack = _make_stack(self.project, "app")
        result = NavigationResult(confirmed=True, command="plan", stack_path=stack)
        with mock.patch("terrax.cli.run_navigation_session", return_value=result), mock.patch(
            "terrax.cli.run_command", return_value=3
        ):
            with self.assertRaises(SystemExit) as raised:
                self._run([])

        self.assertEqual(raised.exception.code, 3)

    def test_missing_path_is_a_user_error(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self._run([str(self.tmp / "missing")])

        self.assertIn("Cannot scan", str(raised.exception.code))

    def test_project_config_feeds_the_session(self) -> None:
        _make_stack(self.project, "app")
        (self.project / ".terrax.json").write_text(
            '{"commands": ["validate"], "max_navigation_columns": 2}', encoding="utf-8"
        )
        with mock.patch(
            "terrax.cli.run_navigation_session", return_value=NavigationResult(False, "validate")
        ) as session:
            self._run([])

        self.assertEqual(session.call_args.args[1:], (("validate",), 2))

    def test_last_reruns_newest_project_entry(self) -> None:
        stack = _make_stack(self.project, "live")
        self._record(1, stack, command="plan")
        self._record(2, self.tmp / "elsewhere", command="destroy")
        self._record(3, stack, command="apply")
        with mock.patch("terrax.cli.run_command", return_value=0) as run_command:
            output = self._run(["--last"])

        self.assertIn("Re-executing last command", output)
        self.assertEqual(run_command.call_args.args[2:], ("apply", str(stack)))

    def test_last_without_history(self) -> None:
        with mock.patch("terrax.cli.run_command") as run_command:
            output = self._run(["--last"])

        self.assertIn("No execution history found", output)
        run_command.assert_not_called()

    def test_history_browser_selection_is_rerun(self) -> None:
        stack = _make_stack(self.project, "live")
        chosen = self._record(1, stack, command="init")
        with mock.patch("terrax.cli.run_history_session", return_value=chosen) as session, mock.patch(
            "terrax.cli.run_command", return_value=0
        ) as run_command:
            self._run(["--history"])

        self.assertEqual([entry.id for entry in session.call_args.args[0]], [1])
        self.assertEqual(run_command.call_args.args[2:], ("init", str(stack)))

    def test_history_browser_cancel(self) -> None:
        self._record(1, self.project, command="init")
        with mock.patch("terrax.cli.run_history_session", return_value=None), mock.patch(
            "terrax.cli.run_command"
        ) as run_command:
            self._run(["--history"])

        run_command.assert_not_called()

    def _plan_report(self, stack: Path) -> PlanReport:
        change = ResourceChange("null_resource.a", "null_resource", "a", "create")
        result = StackResult("live", str(stack), resource_changes=(change,), stats=StackStats(add=1))
        return PlanReport(timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc), stacks=(result,))

    def test_successful_plan_opens_the_reviewer(self) -> None:
        stack = _make_stack(self.project, "live")
        result = NavigationResult(confirmed=True, command="plan", stack_path=stack)
        report = self._plan_report(stack)
        with mock.patch("terrax.cli.run_navigation_session", return_value=result), mock.patch(
            "terrax.cli.run_command", return_value=0
        ) as run_command, mock.patch("terrax.cli.time.time", return_value=1700000000.5), mock.patch(
            "terrax.cli.PlanCollector"
        ) as collector_cls, mock.patch("terrax.cli.run_plan_review_session") as review:
            collector_cls.return_value.collect.return_value = report
            collector_cls.return_value.cleanup_old_plans.return_value = 2
            output = self._run([])

        self.assertEqual(run_command.call_args.kwargs["plan_file"], "terrax-tfplan-1700000000.binary")
        self.assertEqual(collector_cls.call_args.args, (stack, 1700000000))
        self.assertEqual(collector_cls.call_args.kwargs, {"root_config_file": "root.hcl", "parallelism": 0})
        collector_cls.return_value.cleanup_old_plans.assert_called_once_with()
        review.assert_called_once_with(report)
        self.assertIn("Collecting plan results", output)
        self.assertIn("Found 1 stack plans", output)

    def test_plan_without_plan_files_skips_the_reviewer(self) -> None:
        stack = _make_stack(self.project, "live")
        result = NavigationResult(confirmed=True, command="plan", stack_path=stack)
        with mock.patch("terrax.cli.run_navigation_session", return_value=result), mock.patch(
            "terrax.cli.run_command", return_value=0
        ), mock.patch("terrax.cli.run_plan_review_session") as review:
            output = self._run([])

        self.assertIn("No plan files found to review.", output)
        review.assert_not_called()

    def test_failed_plan_skips_the_reviewer(self) -> None:
        stack = _make_stack(self.project, "live")
        result = NavigationResult(confirmed=True, command="plan", stack_path=stack)
        with mock.patch("terrax.cli.run_navigation_session", return_value=result), mock.patch(
            "terrax.cli.run_command", return_value=1
        ), mock.patch("terrax.cli.PlanCollector") as collector_cls:
            with self.assertRaises(SystemExit):
                self._run([])

        collector_cls.assert_not_called()

    def test_last_plan_is_reviewed(self) -> None:
        stack = _make_stack(self.project, "live")
        self._record(1, stack, command="plan")
        report = self._plan_report(stack)
        with mock.patch("terrax.cli.run_command", return_value=0) as run_command, mock.patch(
            "terrax.cli.PlanCollector"
        ) as collector_cls, mock.patch("terrax.cli.run_plan_review_session") as review:
            collector_cls.return_value.collect.return_value = report
            collector_cls.return_value.cleanup_old_plans.return_value = 0
            self._run(["--last"])

        self.assertTrue(run_command.call_args.kwargs["plan_file"].startswith("terrax-tfplan-"))
        self.assertEqual(collector_cls.call_args.args[0], str(stack))
        review.assert_called_once_with(report)

    def test_other_commands_write_no_plan_file(self) -> None:
        stack = _make_stack(self.project, "live")
        self._record(1, stack, command="apply")
        with mock.patch("terrax.cli.run_command", return_value=0) as run_command, mock.patch(
            "terrax.cli.PlanCollector"
        ) as collector_cls:
            self._run(["--last"])

        self.assertIsNone(run_command.call_args.kwargs["plan_file"])
        collector_cls.assert_not_called()

    def test_last_and_history_are_exclusive(self) -> None:
        with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as raised:
                cli.main(["--last", "--history"], cwd=self.project)
        self.assertEqual(raised.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
