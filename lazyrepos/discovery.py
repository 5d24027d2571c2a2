"""Repository discovery from the working directory or piped input.

Piped input is newline-delimited ``name<TAB>path`` records. Without a pipe the
root directory itself and its immediate child directories are scanned for a
``.git`` directory.
"""

from __future__ import annotations

import logging
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .errors import DiscoveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Repo:
    """A named git working tree."""

    name: str
    path: Path


def is_git_dir(directory: Path) -> bool:
    return (directory / ".git").is_dir()


def stdin_is_piped(stream: TextIO | None = None) -> bool:
    """Return whether ``stream`` (default stdin) is a pipe or file rather than a character device.

    ``/dev/null`` is a character device, so it counts as "nothing piped".
    """
    stream = sys.stdin if stream is None else stream
    try:
        return not stat.S_ISCHR(os.fstat(stream.fileno()).st_mode)
    except (AttributeError, OSError, ValueError):
        return False


def _split_record(line: str) -> tuple[str, str] | None:
    name, sep, path = line.partition("\t")
    if not sep:
        return None
    return name, path


def discover_from_lines(root: Path, lines: TextIO | list[str]) -> list[Repo]:
    """Parse ``name<TAB>path`` records, keeping only real git working trees."""
    repos: list[Repo] = []
    for raw_line in lines:
        record = _split_record(raw_line.rstrip("\r\n"))
        if record is None:
            continue
        name, path_text = record
        path = Path(path_text)
        if not path.is_absolute():
            path = root / path
        if is_git_dir(path):
            repos.append(Repo(name=name, path=path))
        else:
            logger.debug("skipping %s: %s is not a git working tree", name, path)
    return repos


def discover_from_dir(root: Path) -> list[Repo]:
    """Return ``root`` (named ``.``) and its git child directories in name order."""
    repos: list[Repo] = []
    if is_git_dir(root):
        repos.append(Repo(name=".", path=root))

    try:
        children = sorted(os.scandir(root), key=lambda entry: entry.name)
    except OSError as exc:
        raise DiscoveryError(f"reading {root}: {exc}") from exc

    for child in children:
        try:
            if not child.is_dir():
                continue
        except OSError:
            continue
        child_path = root / child.name
        if is_git_dir(child_path):
            repos.append(Repo(name=child.name, path=child_path))
    return repos


def discover_repos(root: Path | None = None, stdin: TextIO | None = None) -> list[Repo]:
    """Discover repositories, preferring piped records over a directory scan.

    Raises ``DiscoveryError`` when the working directory cannot be resolved or
    read; every other problem only drops the offending record.
    """
    if root is None:
        try:
            root = Path.cwd()
        except OSError as exc:
            raise DiscoveryError(f"cannot resolve working directory: {exc}") from exc

    stream = sys.stdin if stdin is None else stdin
    if stdin_is_piped(stream):
        try:
            return discover_from_lines(root, stream)
        except OSError as exc:
            raise DiscoveryError(f"reading repository list: {exc}") from exc
    return discover_from_dir(root)


__all__ = [
    "Repo",
    "discover_from_dir",
    "discover_from_lines",
    "discover_repos",
    "is_git_dir",
    "stdin_is_piped",
]
