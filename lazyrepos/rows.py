"""Flattening of the repository → changed-file hierarchy into list rows.

Rows only reference entries by index; they never own status data. The row
list is rebuilt from scratch for every snapshot.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, Union

from .collector import Entry


@dataclass(frozen=True)
class RepoRow:
    entry_index: int
    kind: Literal["repo"] = "repo"


@dataclass(frozen=True)
class FileRow:
    """A changed file under a dirty repository.

    ``path`` is the lookup path (the new side of a rename). ``old_path`` is set
    only for renames and copies, for display.
    """

    entry_index: int
    file_index: int
    code: str
    path: str
    old_path: str | None = None
    kind: Literal["file"] = "file"

    @property
    def is_rename(self) -> bool:
        return self.old_path is not None


Row = Union[RepoRow, FileRow]


def flatten_rows(entries: Sequence[Entry]) -> list[Row]:
    rows: list[Row] = []
    for entry_index, entry in enumerate(entries):
        rows.append(RepoRow(entry_index=entry_index))
        if entry.is_clean:
            continue
        for file_index, file_status in enumerate(entry.status.files):
            old_path: str | None = None
            path = file_status.path
            if file_status.is_rename:
                old_path, path = file_status.rename_parts()
            rows.append(
                FileRow(
                    entry_index=entry_index,
                    file_index=file_index,
                    code=file_status.code,
                    path=path,
                    old_path=old_path,
                )
            )
    return rows


def row_count(entries: Sequence[Entry]) -> int:
    return sum(1 if entry.is_clean else 1 + len(entry.status.files) for entry in entries)


__all__ = ["FileRow", "RepoRow", "Row", "flatten_rows", "row_count"]
