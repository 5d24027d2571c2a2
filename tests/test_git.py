"""Tests for git status parsing, per-field degradation and file diffs.

Parser tests run everywhere; the repository tests need a ``git`` binary and
build throwaway repositories in temporary directories.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from lazyrepos import git_status
from lazyrepos.git_status import (
    FileStatus,
    RepoStatus,
    diff_command_for,
    fetch_repo_status,
    file_diff,
    parse_ahead_behind,
    parse_commit_time,
    parse_porcelain_z,
)


def _git(root: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *args],
        cwd=root,
        check=True,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def _init_repo(root: Path) -> None:
    _git(root, "init", "-q")
    _git(root, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(root, "config", "user.email", "tests@example.com")
    _git(root, "config", "user.name", "Tests")


class ParserTests(unittest.TestCase):
    def test_porcelain_z_records_and_renames(self) -> None:
        output = " M a.py\0?? new file.txt\0R  new.py\0old.py\0"

        files = parse_porcelain_z(output)

        self.assertEqual(
            files,
            [
                FileStatus(" M", "a.py"),
                FileStatus("??", "new file.txt"),
                FileStatus("R ", "old.py -> new.py"),
            ],
        )
        self.assertTrue(files[2].is_rename)
        self.assertEqual(files[2].rename_parts(), ("old.py", "new.py"))
        self.assertFalse(files[0].is_rename)

    def test_porcelain_z_empty_output(self) -> None:
        self.assertEqual(parse_porcelain_z(""), [])

    def test_ahead_behind_reads_left_right_counts(self) -> None:
        self.assertEqual(parse_ahead_behind("3\t5\n"), (5, 3))
        self.assertEqual(parse_ahead_behind(""), (0, 0))
        self.assertEqual(parse_ahead_behind("x\ty"), (0, 0))

    def test_commit_time_is_utc(self) -> None:
        self.assertEqual(parse_commit_time("0"), datetime(1970, 1, 1, tzinfo=timezone.utc))
        self.assertIsNone(parse_commit_time(""))
        self.assertIsNone(parse_commit_time("abc"))

    def test_diff_command_by_status_code(self) -> None:
        self.assertEqual(
            diff_command_for("new.txt", "??"),
            (["diff", "--no-color", "--no-index", "--", "/dev/null", "new.txt"], (0, 1)),
        )
        self.assertEqual(diff_command_for("a.py", "M ")[0], ["diff", "--no-color", "--cached", "--", "a.py"])
        self.assertEqual(diff_command_for("a.py", "MM")[0], ["diff", "--no-color", "--cached", "--", "a.py"])
        self.assertEqual(diff_command_for("a.py", " M")[0], ["diff", "--no-color", "--", "a.py"])


class GitFailureTests(unittest.TestCase):
    def test_missing_git_binary_degrades_to_empty_status(self) -> None:
        with mock.patch("lazyrepos.git_status.subprocess.run", side_effect=FileNotFoundError("git")):
            status = fetch_repo_status(Path("/nowhere"))

        self.assertEqual(status, RepoStatus.empty())

    def test_nonzero_exit_returns_none(self) -> None:
        completed = subprocess.CompletedProcess(args=["git"], returncode=128, stdout="fatal")
        with mock.patch("lazyrepos.git_status.subprocess.run", return_value=completed):
            self.assertIsNone(git_status._run_git(Path("/nowhere"), ["status"]))

    def test_no_index_diff_accepts_exit_status_one(self) -> None:
        completed = subprocess.CompletedProcess(args=["git"], returncode=1, stdout="+hello\n")
        with mock.patch("lazyrepos.git_status.subprocess.run", return_value=completed) as run_mock:
            text = file_diff(Path("/repo"), "new.txt", "??")

        self.assertEqual(text, "+hello\n")
        self.assertEqual(run_mock.call_args.args[0][:3], ["git", "-C", "/repo"])


@unittest.skipIf(shutil.which("git") is None, "git is required for repository status tests")
class RepositoryStatusTests(unittest.TestCase):
    def test_status_of_clean_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _init_repo(root)
            (root / "a.txt").write_text("one\n", encoding="utf-8")
            _git(root, "add", "a.txt")
            _git(root, "commit", "-q", "-m", "init")
            _git(root, "tag", "v0.1")

            status = fetch_repo_status(root)

        self.assertEqual(status.branch, "main")
        self.assertEqual(status.tag, "v0.1")
        self.assertFalse(status.has_upstream)
        self.assertEqual((status.ahead, status.behind, status.stash_count), (0, 0, 0))
        self.assertIsNotNone(status.last_commit_time)
        self.assertTrue(status.is_clean)
        self.assertEqual(status.files, ())

    def test_status_and_diffs_of_dirty_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _init_repo(root)
            (root / "a.txt").write_text("one\n", encoding="utf-8")
            _git(root, "add", "a.txt")
            _git(root, "commit", "-q", "-m", "init")

            (root / "a.txt").write_text("one\nchanged line\n", encoding="utf-8")
            (root / "staged.txt").write_text("staged content\n", encoding="utf-8")
            _git(root, "add", "staged.txt")
            (root / "untracked.txt").write_text("hello\n", encoding="utf-8")

            status = fetch_repo_status(root)
            codes = {item.path: item.code for item in status.files}
            unstaged = file_diff(root, "a.txt", codes["a.txt"])
            staged = file_diff(root, "staged.txt", codes["staged.txt"])
            untracked = file_diff(root, "untracked.txt", codes["untracked.txt"])

        self.assertFalse(status.is_clean)
        self.assertEqual(codes, {"a.txt": " M", "staged.txt": "A ", "untracked.txt": "??"})
        self.assertIn("+changed line", unstaged)
        self.assertIn("+staged content", staged)
        self.assertIn("+hello", untracked)

    def test_stash_entries_are_counted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _init_repo(root)
            (root / "a.txt").write_text("one\n", encoding="utf-8")
            _git(root, "add", "a.txt")
            _git(root, "commit", "-q", "-m", "init")
            (root / "a.txt").write_text("two\n", encoding="utf-8")
            _git(root, "stash", "-q")

            status = fetch_repo_status(root)

        self.assertEqual(status.stash_count, 1)
        self.assertTrue(status.is_clean)


if __name__ == "__main__":
    unittest.main()
