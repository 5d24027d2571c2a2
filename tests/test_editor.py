"""Tests for editor command resolution and launch outcomes."""

from __future__ import annotations

import contextlib
import subprocess
import unittest
from pathlib import Path
from unittest import mock

from lazyrepos.editor import editor_command, launch_editor


class EditorCommandTests(unittest.TestCase):
    def test_visual_wins_over_editor(self) -> None:
        self.assertEqual(editor_command({"VISUAL": "code --wait", "EDITOR": "nano"}), ["code", "--wait"])

    def test_editor_used_when_visual_blank(self) -> None:
        self.assertEqual(editor_command({"VISUAL": "  ", "EDITOR": "nano"}), ["nano"])

    def test_falls_back_to_vi(self) -> None:
        self.assertEqual(editor_command({}), ["vi"])


class LaunchEditorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.events: list[str] = []

    @contextlib.contextmanager
    def _suspend(self):
        self.events.append("suspend")
        try:
            yield
        finally:
            self.events.append("resume")

    def test_successful_run_returns_none_inside_suspension(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0)

        def run(*args, **kwargs):
            self.events.append("run")
            return completed

        with mock.patch("lazyrepos.editor.subprocess.run", side_effect=run) as run_mock:
            error = launch_editor(Path("/repo/a.py"), self._suspend, cwd=Path("/repo"), environ={"EDITOR": "nano"})

        self.assertIsNone(error)
        self.assertEqual(self.events, ["suspend", "run", "resume"])
        run_mock.assert_called_once_with(["nano", "/repo/a.py"], cwd=Path("/repo"), stdin=None, check=False)

    def test_nonzero_exit_is_reported(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=2)
        with mock.patch("lazyrepos.editor.subprocess.run", return_value=completed):
            error = launch_editor(Path("/repo"), self._suspend, environ={"EDITOR": "nano"})

        self.assertEqual(error, "Editor exited with status 2")

    def test_spawn_failure_is_reported_and_terminal_restored(self) -> None:
        with mock.patch("lazyrepos.editor.subprocess.run", side_effect=FileNotFoundError("no such editor")):
            error = launch_editor(Path("/repo"), self._suspend, environ={"EDITOR": "nope"})

        self.assertTrue(error.startswith("Failed to launch editor"))
        self.assertEqual(self.events, ["suspend", "resume"])

    def test_unparseable_command_never_suspends(self) -> None:
        with mock.patch("lazyrepos.editor.subprocess.run") as run_mock:
            error = launch_editor(Path("/repo"), self._suspend, environ={"EDITOR": "'unterminated"})

        self.assertTrue(error.startswith("Cannot edit"))
        run_mock.assert_not_called()
        self.assertEqual(self.events, [])


if __name__ == "__main__":
    unittest.main()
