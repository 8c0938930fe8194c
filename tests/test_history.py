from __future__ import annotations

import json
import os
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from terrax.columns import ResizeEvent
from terrax.history import (
    ExecutionLogEntry,
    FileRepository,
    HistoryBrowser,
    HistoryService,
    current_user,
    find_project_root,
    has_path_prefix,
    relative_stack_path,
    update_history,
)

STARTED = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def _entry(entry_id: int, absolute_path: str = "/work/infra/live/app", command: str = "plan") -> ExecutionLogEntry:
    return ExecutionLogEntry(
        id=entry_id,
        timestamp=STARTED,
        user="dev",
        stack_path="live/app",
        absolute_path=absolute_path,
        command=command,
        exit_code=0,
        duration_s=1.5,
        summary="Command completed successfully",
    )


class ExecutionLogEntryTests(unittest.TestCase):
    def test_dict_round_trip(self) -> None:
        entry = _entry(3)
        self.assertEqual(ExecutionLogEntry.from_dict(entry.to_dict()), entry)

    def test_legacy_record_reuses_stack_path(self) -> None:
        entry = ExecutionLogEntry.from_dict(
            {"id": 1, "timestamp": "2024-05-01T12:30:00Z", "stack_path": "/old/path", "command": "apply"}
        )
        self.assertEqual(entry.absolute_path, "/old/path")
        self.assertEqual(entry.timestamp, STARTED)

    def test_malformed_record_raises_value_error(self) -> None:
        for data in (["x"], {"id": "one"}, {"timestamp": 5}, {"duration_s": "slow"}):
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    ExecutionLogEntry.from_dict(data)


class FileRepositoryTests(unittest.TestCase):
    def test_missing_file_behaves_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            repo = FileRepository(Path(tmp) / "history.log")
            self.assertEqual(repo.load_all(), [])
            self.assertEqual(repo.next_id(), 1)
            repo.trim(10)
            self.assertFalse(repo.file_path.exists())

    def test_append_then_load_newest_first(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            repo = FileRepository(Path(tmp) / "nested" / "history.log")
            repo.append(_entry(1))
            repo.append(_entry(2, command="apply"))

            entries = repo.load_all()
            self.assertEqual([entry.id for entry in entries], [2, 1])
            self.assertEqual(entries[0].command, "apply")
            self.assertEqual(repo.next_id(), 3)

    def test_malformed_lines_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "history.log"
            lines = [json.dumps(_entry(4).to_dict()), "{broken", "", json.dumps({"id": "x"}), json.dumps(_entry(7).to_dict())]
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")
            repo = FileRepository(path)

            self.assertEqual([entry.id for entry in repo.load_all()], [7, 4])
            self.assertEqual(repo.next_id(), 8)

    def test_trim_keeps_newest_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            repo = FileRepository(Path(tmp) / "history.log")
            for entry_id in range(1, 6):
                repo.append(_entry(entry_id))

            repo.trim(2)

            self.assertEqual([entry.id for entry in repo.load_all()], [5, 4])
            self.assertFalse((Path(tmp) / "history.log.tmp").exists())
            with self.assertRaises(ValueError):
                repo.trim(0)


class HistoryServiceTests(unittest.TestCase):
    def _project(self, tmp: str) -> Path:
        root = Path(tmp).resolve() / "infra"
        (root / "live" / "app").mkdir(parents=True)
        (root / "root.hcl").write_text("", encoding="utf-8")
        return root

    def test_find_project_root_walks_up(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = self._project(tmp)
            self.assertEqual(find_project_root(root / "live" / "app", "root.hcl"), root)
            self.assertEqual(find_project_root(root / "root.hcl", "root.hcl"), root)
            self.assertIsNone(find_project_root(Path(tmp), "root.hcl"))

    def test_relative_stack_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = self._project(tmp)
            self.assertEqual(relative_stack_path(root / "live" / "app", "root.hcl"), os.path.join("live", "app"))
            outside = str(Path(tmp) / "elsewhere")
            self.assertEqual(relative_stack_path(outside, "root.hcl"), outside)

    def test_filter_by_current_project(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = self._project(tmp)
            inside = _entry(1, absolute_path=str(root / "live" / "app"))
            other = _entry(2, absolute_path=str(Path(tmp) / "other" / "app"))
            sibling = _entry(3, absolute_path=str(root) + "-copy/live")
            service = HistoryService(FileRepository(Path(tmp) / "history.log"), "root.hcl")

            filtered = service.filter_by_current_project([inside, other, sibling], cwd=root / "live")
            self.assertEqual(filtered, [inside])

            unfiltered = service.filter_by_current_project([inside, other], cwd=Path(tmp))
            self.assertEqual(unfiltered, [inside, other])

    def test_last_execution_for_project(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = self._project(tmp)
            repo = FileRepository(Path(tmp) / "history.log")
            repo.append(_entry(1, absolute_path=str(root / "live" / "app")))
            repo.append(_entry(2, absolute_path=str(Path(tmp) / "other")))
            service = HistoryService(repo, "root.hcl")

            self.assertEqual(service.last_execution_for_project(cwd=root).id, 1)
            self.assertEqual(service.last_execution_for_project(cwd=Path(tmp)).id, 2)

    def test_path_prefix_resolves_symlinks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = self._project(tmp)
            link = Path(tmp) / "link"
            link.symlink_to(root, target_is_directory=True)
            self.assertTrue(has_path_prefix(link / "live" / "app", root))
            self.assertFalse(has_path_prefix(Path(tmp), root))

    def test_current_user_falls_back_to_unknown(self) -> None:
        with mock.patch("terrax.history.service.getpass.getuser", side_effect=KeyError("uid")):
            self.assertEqual(current_user(), "unknown")


class HistoryBrowserTests(unittest.TestCase):
    def _browser(self, count: int = 3) -> HistoryBrowser:
        entries = tuple(_entry(entry_id) for entry_id in range(count, 0, -1))
        return update_history(HistoryBrowser(entries=entries), ResizeEvent(80, 6))

    def test_cursor_wraps_both_ways(self) -> None:
        browser = update_history(self._browser(), "UP")
        self.assertEqual(browser.cursor, 2)
        browser = update_history(browser, "j")
        self.assertEqual(browser.cursor, 0)

    def test_scroll_follows_cursor(self) -> None:
        browser = self._browser(5)
        for _ in range(3):
            browser = update_history(browser, "DOWN")
        self.assertEqual(browser.cursor, 3)
        self.assertEqual(browser.scroll_offset, 2)

    def test_enter_selects_and_quit_keys_cancel(self) -> None:
        browser = update_history(update_history(self._browser(), "DOWN"), "ENTER")
        self.assertEqual(browser.selected.id, 2)
        self.assertIs(update_history(browser, "DOWN"), browser)

        for key in ("q", "ESC", "CTRL_C"):
            with self.subTest(key=key):
                cancelled = update_history(self._browser(), key)
                self.assertTrue(cancelled.quit)
                self.assertIsNone(cancelled.selected)

    def test_enter_on_empty_history_does_nothing(self) -> None:
        browser = update_history(HistoryBrowser(), "ENTER")
        self.assertFalse(browser.done)


if __name__ == "__main__":
    unittest.main()
