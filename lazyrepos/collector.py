"""Concurrent status collection across repositories.

One worker per repository runs ``fetch_status`` in a thread pool. The caller
blocks on every future in submission order, so results keep index
correspondence with the input list and nothing is observable before the join.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .discovery import Repo
from .git_status import RepoStatus, fetch_repo_status

logger = logging.getLogger(__name__)

StatusFetcher = Callable[[Path], RepoStatus]


@dataclass(frozen=True)
class Entry:
    repo: Repo
    status: RepoStatus

    @property
    def is_clean(self) -> bool:
        return self.status.is_clean


Snapshot = tuple[Entry, ...]


def _fetch_or_empty(fetch_status: StatusFetcher, repo: Repo) -> RepoStatus:
    try:
        return fetch_status(repo.path)
    except Exception:
        logger.warning("status fetch for %s (%s) failed", repo.name, repo.path, exc_info=True)
        return RepoStatus.empty()


def gather_entries(
    repos: Sequence[Repo],
    fetch_status: StatusFetcher = fetch_repo_status,
) -> list[Entry]:
    """Fetch status for every repo in parallel and return entries in input order."""
    if not repos:
        return []

    with ThreadPoolExecutor(max_workers=len(repos), thread_name_prefix="lazyrepos-status") as executor:
        futures = [executor.submit(_fetch_or_empty, fetch_status, repo) for repo in repos]
        statuses = [future.result() for future in futures]

    return [Entry(repo=repo, status=status) for repo, status in zip(repos, statuses)]


def entry_sort_key(entry: Entry) -> tuple[bool, str, str]:
    """Dirty entries first, then name ascending; path breaks name ties."""
    return entry.status.is_clean, entry.repo.name, str(entry.repo.path)


def sort_entries(entries: Sequence[Entry]) -> Snapshot:
    return tuple(sorted(entries, key=entry_sort_key))


def collect_snapshot(
    repos: Sequence[Repo],
    fetch_status: StatusFetcher = fetch_repo_status,
) -> Snapshot:
    """Run one full collection pass and return the sorted, immutable snapshot."""
    snapshot = sort_entries(gather_entries(repos, fetch_status))
    logger.debug(
        "collected %d repos (%d dirty)",
        len(snapshot),
        sum(1 for entry in snapshot if not entry.is_clean),
    )
    return snapshot


__all__ = [
    "Entry",
    "Snapshot",
    "StatusFetcher",
    "collect_snapshot",
    "entry_sort_key",
    "gather_entries",
    "sort_entries",
]
