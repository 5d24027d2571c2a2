"""Tests for the interactive key loop and one-shot snapshot printing."""

from __future__ import annotations

import io
import os
import unittest
from pathlib import Path
from unittest import mock

from lazyrepos import runtime
from lazyrepos.collector import Entry
from lazyrepos.discovery import Repo
from lazyrepos.git_status import FileStatus, RepoStatus
from lazyrepos.state import RunEditor, StatusBrowser
from lazyrepos.ui_theme import PLAIN_THEME

REPO = Repo("alpha", Path("/work/alpha"))


def make_entries(files=()) -> tuple[Entry, ...]:
    status = RepoStatus(
        branch="main",
        tag="",
        ahead=0,
        behind=0,
        stash_count=0,
        has_upstream=True,
        last_commit_time=None,
        files=tuple(files),
        is_clean=not files,
    )
    return (Entry(repo=REPO, status=status),)


class MainLoopTests(unittest.TestCase):
    def _run(self, keys: list, run_editor=None) -> tuple[StatusBrowser, mock.MagicMock, mock.MagicMock]:
        collect = mock.Mock(return_value=make_entries([FileStatus(" M", "a.py")]))
        browser = StatusBrowser(collect=collect)
        terminal = mock.MagicMock()
        run_editor = run_editor or mock.Mock(return_value=None)
        with mock.patch("lazyrepos.runtime.read_key", side_effect=keys), mock.patch(
            "lazyrepos.runtime.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
        ):
            runtime.run_main_loop(browser, terminal, 0, PLAIN_THEME, run_editor)
        return browser, terminal, collect

    def test_quit_key_ends_loop_after_first_frame(self) -> None:
        _browser, terminal, _collect = self._run(["q"])

        terminal.raw_mode.assert_called_once()
        self.assertEqual(terminal.write_frame.call_count, 1)

    def test_idle_polls_and_interrupts_do_not_redraw(self) -> None:
        _browser, terminal, _collect = self._run(["", KeyboardInterrupt(), "", "q"])

        self.assertEqual(terminal.write_frame.call_count, 1)

    def test_editor_effect_runs_and_feeds_completion_back(self) -> None:
        run_editor = mock.Mock(return_value="Editor exited with status 1")

        browser, terminal, collect = self._run(["j", "e", "q"], run_editor=run_editor)

        run_editor.assert_called_once_with(RunEditor(target=REPO.path / "a.py", cwd=REPO.path))
        self.assertEqual(collect.call_count, 2)
        self.assertEqual(browser.state.cursor, 1)
        self.assertGreaterEqual(terminal.write_frame.call_count, 3)

    def test_ctrl_l_forces_redraw(self) -> None:
        _browser, terminal, _collect = self._run(["CTRL_L", "q"])

        self.assertEqual(terminal.write_frame.call_count, 2)


class RunInteractiveTests(unittest.TestCase):
    def test_missing_terminal_falls_back_to_snapshot(self) -> None:
        with mock.patch("lazyrepos.runtime._open_key_input", side_effect=OSError("no tty")), mock.patch(
            "lazyrepos.runtime.print_snapshot"
        ) as print_mock, mock.patch("lazyrepos.runtime.run_main_loop") as loop_mock:
            runtime.run_interactive([REPO])

        print_mock.assert_called_once()
        self.assertEqual(print_mock.call_args.args[0], [REPO])
        loop_mock.assert_not_called()


class PrintSnapshotTests(unittest.TestCase):
    def test_prints_aligned_plain_listing(self) -> None:
        stream = io.StringIO()
        with mock.patch(
            "lazyrepos.runtime.collect_snapshot",
            return_value=make_entries([FileStatus("??", "new.txt")]),
        ) as collect_mock:
            runtime.print_snapshot([REPO], stream, PLAIN_THEME, 100)

        collect_mock.assert_called_once_with([REPO])
        lines = stream.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("── alpha "))
        self.assertEqual(lines[1], "   ? new.txt")
        self.assertNotIn("\x1b", stream.getvalue())


if __name__ == "__main__":
    unittest.main()
