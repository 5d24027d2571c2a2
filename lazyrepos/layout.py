"""Column layout for the repository/file list.

Rendering is two-pass: ``measure_columns`` scans every repo row once for the
widest value of each right-hand column, then each row is rendered against
those fixed widths. The result depends only on (entries, rows, width, now,
theme), so identical inputs always give identical lines.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, fields
from datetime import datetime, timezone

from .ansi import display_width
from .collector import Entry
from .format import MIN_LEADER_WIDTH, ListItem, pad_right, relative_time, truncate, truncate_path
from .git_status import RepoStatus
from .rows import FileRow, RepoRow, Row
from .ui_theme import UITheme

MIN_LINE_WIDTH = 60
MIN_RENAME_HALF = 8
MIN_NAME_WIDTH = 8
REPO_PREFIX = "── "
FILE_INDENT = "   "
RENAME_ARROW = " → "
NO_UPSTREAM_MARK = "∅"


@dataclass(frozen=True)
class RepoColumns:
    """Plain-text right-hand column values for one repository."""

    branch: str
    age: str
    ahead: str
    behind: str
    stash: str
    tag: str


@dataclass(frozen=True)
class ColumnWidths:
    branch: int = 0
    age: int = 0
    ahead: int = 0
    behind: int = 0
    stash: int = 0
    tag: int = 0

    def right_width(self) -> int:
        """Width of a right block: branch always, other columns when non-empty."""
        widths = [self.branch] + [w for w in (self.age, self.ahead, self.behind, self.stash, self.tag) if w > 0]
        return sum(widths) + len(widths) - 1


def repo_columns(status: RepoStatus, now: datetime) -> RepoColumns:
    if not status.has_upstream:
        ahead = NO_UPSTREAM_MARK
    elif status.ahead > 0:
        ahead = f"↑{status.ahead}"
    else:
        ahead = ""
    return RepoColumns(
        branch=status.branch,
        age=relative_time(status.last_commit_time, now),
        ahead=ahead,
        behind=f"↓{status.behind}" if status.behind > 0 else "",
        stash=f"≡{status.stash_count}" if status.stash_count > 0 else "",
        tag=f"@{status.tag}" if status.tag else "",
    )


def measure_columns(columns: Sequence[RepoColumns]) -> ColumnWidths:
    widths = {field.name: 0 for field in fields(ColumnWidths)}
    for values in columns:
        for name in widths:
            widths[name] = max(widths[name], display_width(getattr(values, name)))
    return ColumnWidths(**widths)


def file_sign(code: str, theme: UITheme) -> tuple[str, str]:
    """Map a porcelain code to its one-letter sign and theme style."""
    if code == "??":
        return "?", theme.file_untracked
    if code == "MM":
        return "M", theme.file_mixed
    if code == " M":
        return "M", theme.file_modified
    if code == "M ":
        return "M", theme.file_added
    if code == "A ":
        return "A", theme.file_added
    if code == "AM":
        return "A", theme.file_mixed
    if code in {" D", "D "}:
        return "D", theme.file_deleted
    if code[:1] in {"R", "C"}:
        return code[0], theme.file_added if code[1:] == " " else theme.file_mixed
    return "~", theme.faint


def with_group_breaks(entries: Sequence[Entry], rows: Sequence[Row], lines: Sequence[str]) -> tuple[list[str], list[int]]:
    """Insert blank lines around dirty repositories.

    Returns the display lines and, for each row, the index of its line.
    """
    out: list[str] = []
    row_lines: list[int] = []
    prev_dirty = False
    for row, line in zip(rows, lines):
        if isinstance(row, RepoRow):
            dirty = not entries[row.entry_index].is_clean
            if out and (prev_dirty or dirty):
                out.append("")
            prev_dirty = dirty
        row_lines.append(len(out))
        out.append(line)
    return out, row_lines


class LayoutEngine:
    """Render flattened rows into aligned, width-adapted lines."""

    def __init__(self, theme: UITheme) -> None:
        self.theme = theme

    def render(
        self,
        entries: Sequence[Entry],
        rows: Sequence[Row],
        width: int,
        now: datetime | None = None,
    ) -> list[str]:
        if now is None:
            now = datetime.now(timezone.utc)
        columns = [repo_columns(entry.status, now) for entry in entries]
        widths = measure_columns([columns[row.entry_index] for row in rows if isinstance(row, RepoRow)])
        available = self.available_width(entries, rows, widths, width)

        lines: list[str] = []
        for row in rows:
            if isinstance(row, RepoRow):
                lines.append(self.render_repo_row(entries[row.entry_index], columns[row.entry_index], widths, available))
            else:
                lines.append(self.render_file_row(row, available))
        return lines

    def available_width(
        self,
        entries: Sequence[Entry],
        rows: Sequence[Row],
        widths: ColumnWidths,
        width: int,
    ) -> int:
        """Line width shared by every row: the natural width, capped by ``width``."""
        right = widths.right_width()
        natural = MIN_LINE_WIDTH
        for row in rows:
            if isinstance(row, RepoRow):
                name = entries[row.entry_index].repo.name
                natural = max(natural, display_width(REPO_PREFIX + name) + MIN_LEADER_WIDTH + right)
            else:
                natural = max(natural, display_width(_plain_file_line(row)))
        return max(1, min(width, natural))

    def render_repo_row(
        self,
        entry: Entry,
        values: RepoColumns,
        widths: ColumnWidths,
        available: int,
    ) -> str:
        theme = self.theme
        fixed = display_width(REPO_PREFIX) + MIN_LEADER_WIDTH + widths.right_width()
        name_budget = max(MIN_NAME_WIDTH, available - fixed)
        name = truncate(entry.repo.name, name_budget)

        branch_style = "" if entry.is_clean else theme.branch_dirty
        parts = [theme.paint(branch_style, values.branch) + _padding(values.branch, widths.branch)]
        if widths.age:
            parts.append(theme.paint(theme.faint, values.age) + _padding(values.age, widths.age))
        if widths.ahead:
            ahead_style = theme.faint if values.ahead == NO_UPSTREAM_MARK else theme.ahead
            parts.append(theme.paint(ahead_style, values.ahead) + _padding(values.ahead, widths.ahead))
        if widths.behind:
            parts.append(theme.paint(theme.behind, values.behind) + _padding(values.behind, widths.behind))
        if widths.stash:
            parts.append(pad_right(values.stash, widths.stash))
        if widths.tag:
            parts.append(theme.paint(theme.tag, values.tag) + _padding(values.tag, widths.tag))

        item = ListItem(
            label=theme.paint(theme.faint, REPO_PREFIX) + theme.paint(theme.bold, name),
            suffix=" ".join(parts),
        )
        return item.render(available, theme.faint, theme.reset)

    def render_file_row(self, row: FileRow, available: int) -> str:
        theme = self.theme
        sign, style = file_sign(row.code, theme)
        prefix = f"{FILE_INDENT}{sign} "
        budget = available - display_width(prefix)

        if row.old_path is None:
            return FILE_INDENT + theme.paint(style, f"{sign} {truncate_path(row.path, budget)}")

        halves = budget - display_width(RENAME_ARROW)
        old_width = max(halves // 2, MIN_RENAME_HALF)
        new_width = max(halves - halves // 2, MIN_RENAME_HALF)
        old = truncate_path(row.old_path, old_width)
        new = truncate_path(row.path, new_width)
        return (
            FILE_INDENT
            + theme.paint(theme.faint, f"{sign} {old}")
            + theme.paint(style, f"{RENAME_ARROW}{new}")
        )


def _padding(text: str, width: int) -> str:
    return " " * max(0, width - display_width(text))


def _plain_file_line(row: FileRow) -> str:
    if row.old_path is None:
        return f"{FILE_INDENT}X {row.path}"
    return f"{FILE_INDENT}X {row.old_path}{RENAME_ARROW}{row.path}"


def render_snapshot_text(
    entries: Sequence[Entry],
    rows: Sequence[Row],
    width: int,
    theme: UITheme,
    now: datetime | None = None,
) -> str:
    """Render a whole snapshot as printable text with group breaks."""
    lines = LayoutEngine(theme).render(entries, rows, width, now)
    display_lines, _row_lines = with_group_breaks(entries, rows, lines)
    return "".join(f"{line}\n" for line in display_lines)


__all__ = [
    "ColumnWidths",
    "LayoutEngine",
    "MIN_LINE_WIDTH",
    "RepoColumns",
    "file_sign",
    "measure_columns",
    "render_snapshot_text",
    "repo_columns",
    "with_group_breaks",
]
