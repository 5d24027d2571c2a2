"""Per-repository git status snapshots and single-file diffs.

Every git invocation degrades independently: a failing command yields the
zero value for the one field it feeds and never aborts the snapshot.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

DETACHED_BRANCH = "HEAD"
RENAME_SEPARATOR = " -> "
UNTRACKED_CODE = "??"


@dataclass(frozen=True)
class FileStatus:
    """One porcelain status record.

    Renames and copies keep a single record whose ``path`` reads
    ``"old -> new"``; ``rename_parts`` splits it back apart.
    """

    code: str
    path: str

    @property
    def is_rename(self) -> bool:
        return ("R" in self.code or "C" in self.code) and RENAME_SEPARATOR in self.path

    def rename_parts(self) -> tuple[str, str]:
        old, _sep, new = self.path.partition(RENAME_SEPARATOR)
        return old, new


@dataclass(frozen=True)
class RepoStatus:
    branch: str
    tag: str
    ahead: int
    behind: int
    stash_count: int
    has_upstream: bool
    last_commit_time: datetime | None
    files: tuple[FileStatus, ...]
    is_clean: bool

    @classmethod
    def empty(cls) -> "RepoStatus":
        """Zero-valued status used when a whole fetch fails."""
        return cls(
            branch=DETACHED_BRANCH,
            tag="",
            ahead=0,
            behind=0,
            stash_count=0,
            has_upstream=False,
            last_commit_time=None,
            files=(),
            is_clean=True,
        )


def _run_git(
    repo_root: Path,
    args: list[str],
    timeout_seconds: float | None = None,
    ok_returncodes: tuple[int, ...] = (0,),
) -> str | None:
    """Run ``git -C repo_root args`` and return stdout, or ``None`` on failure."""
    try:
        proc = subprocess.run(
            ["git", "-C", str(repo_root), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s in %s failed: %s", " ".join(args), repo_root, exc)
        return None
    if proc.returncode not in ok_returncodes:
        logger.debug("git %s in %s exited %d", " ".join(args), repo_root, proc.returncode)
        return None
    return proc.stdout


def _git_line(repo_root: Path, args: list[str], timeout_seconds: float | None) -> str:
    output = _run_git(repo_root, args, timeout_seconds)
    return output.strip() if output else ""


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def parse_porcelain_z(output: str) -> list[FileStatus]:
    """Parse ``git status --porcelain=v1 -z`` output into file records.

    In ``-z`` mode a rename or copy is followed by an extra token holding the
    source path; it is folded into ``"old -> new"``.
    """
    files: list[FileStatus] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if len(token) < 4 or token[2] != " ":
            continue

        code = token[:2]
        path_text = token[3:]
        if ("R" in code or "C" in code) and index < len(tokens):
            source = tokens[index]
            index += 1
            path_text = f"{source}{RENAME_SEPARATOR}{path_text}"
        files.append(FileStatus(code=code, path=path_text))
    return files


def parse_ahead_behind(output: str) -> tuple[int, int]:
    """Parse ``rev-list --left-right --count @{upstream}...HEAD`` into (ahead, behind)."""
    parts = output.split()
    if len(parts) != 2:
        return 0, 0
    behind, ahead = (_parse_int(part) for part in parts)
    return ahead, behind


def parse_commit_time(text: str) -> datetime | None:
    if not text:
        return None
    try:
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def fetch_repo_status(repo_root: Path, timeout_seconds: float | None = None) -> RepoStatus:
    """Collect branch, tag, tracking, stash, last-commit and file state for a repo."""
    branch = _git_line(repo_root, ["branch", "--show-current"], timeout_seconds) or DETACHED_BRANCH
    tag = _git_line(repo_root, ["describe", "--tags", "--abbrev=0"], timeout_seconds)

    upstream = _git_line(repo_root, ["rev-parse", "--abbrev-ref", "@{upstream}"], timeout_seconds)
    has_upstream = bool(upstream)
    ahead = behind = 0
    if has_upstream:
        counts = _git_line(
            repo_root,
            ["rev-list", "--left-right", "--count", "@{upstream}...HEAD"],
            timeout_seconds,
        )
        ahead, behind = parse_ahead_behind(counts)

    stash_output = _run_git(repo_root, ["stash", "list"], timeout_seconds) or ""
    stash_count = len(stash_output.strip().splitlines()) if stash_output.strip() else 0

    last_commit_time = parse_commit_time(_git_line(repo_root, ["log", "-1", "--format=%ct"], timeout_seconds))

    porcelain = _run_git(
        repo_root,
        ["status", "--porcelain=v1", "-z", "--untracked-files=normal"],
        timeout_seconds,
    )
    files = tuple(parse_porcelain_z(porcelain or ""))

    return RepoStatus(
        branch=branch,
        tag=tag,
        ahead=ahead,
        behind=behind,
        stash_count=stash_count,
        has_upstream=has_upstream,
        last_commit_time=last_commit_time,
        files=files,
        is_clean=not files,
    )


def diff_command_for(file_path: str, code: str) -> tuple[list[str], tuple[int, ...]]:
    """Return git args and accepted exit codes for diffing one status record."""
    if code == UNTRACKED_CODE:
        # --no-index exits 1 whenever the files differ.
        return ["diff", "--no-color", "--no-index", "--", "/dev/null", file_path], (0, 1)
    if code[:1] not in {" ", ""}:
        return ["diff", "--no-color", "--cached", "--", file_path], (0,)
    return ["diff", "--no-color", "--", file_path], (0,)


def file_diff(
    repo_root: Path,
    file_path: str,
    code: str,
    timeout_seconds: float | None = None,
) -> str:
    """Return unified diff text for one changed file, or ``""`` when unavailable."""
    args, ok_returncodes = diff_command_for(file_path, code)
    return _run_git(repo_root, args, timeout_seconds, ok_returncodes=ok_returncodes) or ""


__all__ = [
    "DETACHED_BRANCH",
    "FileStatus",
    "RepoStatus",
    "diff_command_for",
    "fetch_repo_status",
    "file_diff",
    "parse_ahead_behind",
    "parse_commit_time",
    "parse_porcelain_z",
]
