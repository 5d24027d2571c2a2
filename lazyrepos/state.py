"""List/detail view state machine for the repository browser.

``StatusBrowser.handle_key`` mutates view state and may return an effect for
the event loop to perform (quit, or run the editor). The editor outcome comes
back as an ``EditorFinished`` event, after which the snapshot is rebuilt.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Union

from .collector import Entry, Snapshot
from .git_status import file_diff
from .highlight import diff_lines
from .rows import FileRow, RepoRow, Row, flatten_rows
from .scroll import ViewportScroll

SnapshotSource = Callable[[], Snapshot]
DiffLoader = Callable[[Path, str, str], str]
DiffFormatter = Callable[[str], list[str]]

QUIT_KEYS_LIST = frozenset({"q", "ESC", "CTRL_C"})
BACK_KEYS_DETAIL = frozenset({"q", "ESC", "BACKSPACE", "LEFT", "h"})
SELECT_KEYS = frozenset({"ENTER", "RIGHT", "l"})


class ViewMode(Enum):
    LIST = "list"
    DETAIL = "detail"


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class RunEditor:
    target: Path
    cwd: Path


Effect = Union[Quit, RunEditor]


@dataclass(frozen=True)
class EditorFinished:
    """Completion event for a ``RunEditor`` effect."""

    error: str | None = None


def _plain_diff_lines(text: str) -> list[str]:
    return diff_lines(text, colorize=False)


@dataclass
class BrowserState:
    entries: Snapshot = ()
    collected_at: datetime | None = None
    rows: list[Row] = field(default_factory=list)
    mode: ViewMode = ViewMode.LIST
    cursor: int = 0
    list_scroll: ViewportScroll = field(default_factory=ViewportScroll)
    detail_scroll: ViewportScroll = field(default_factory=ViewportScroll)
    detail_row: FileRow | None = None
    detail_title: str = ""
    detail_lines: list[str] = field(default_factory=list)
    status_message: str = ""
    dirty: bool = True


class StatusBrowser:
    """Drive cursor, selection and mode transitions over a status snapshot."""

    def __init__(
        self,
        collect: SnapshotSource,
        load_diff: DiffLoader = file_diff,
        format_diff: DiffFormatter = _plain_diff_lines,
    ) -> None:
        self.collect = collect
        self.load_diff = load_diff
        self.format_diff = format_diff
        self.state = BrowserState()
        self.refresh()

    def refresh(self) -> None:
        """Swap in a fresh snapshot and rebuild rows, keeping the cursor index in bounds."""
        state = self.state
        entries = tuple(self.collect())
        rows = flatten_rows(entries)
        state.entries = entries
        state.collected_at = datetime.now(timezone.utc)
        state.rows = rows
        state.cursor = max(0, min(state.cursor, len(rows) - 1))
        state.dirty = True

    def current_row(self) -> Row | None:
        state = self.state
        if not state.rows:
            return None
        return state.rows[state.cursor]

    def entry_for(self, row: Row) -> Entry:
        return self.state.entries[row.entry_index]

    def move_cursor(self, delta: int) -> None:
        """Move the list cursor, wrapping past either end."""
        state = self.state
        if not state.rows:
            return
        state.cursor = (state.cursor + delta) % len(state.rows)
        state.dirty = True

    def jump_cursor(self, index: int) -> None:
        state = self.state
        if not state.rows:
            return
        state.cursor = max(0, min(index, len(state.rows) - 1))
        state.dirty = True

    def select(self) -> bool:
        """Open the diff for the file row under the cursor; repo rows are inert."""
        row = self.current_row()
        if not isinstance(row, FileRow):
            return False
        entry = self.entry_for(row)
        diff_text = self.load_diff(entry.repo.path, row.path, row.code)

        state = self.state
        state.mode = ViewMode.DETAIL
        state.detail_row = row
        state.detail_title = f"{entry.repo.name}: {row.path}"
        state.detail_lines = self.format_diff(diff_text)
        state.detail_scroll = ViewportScroll()
        state.dirty = True
        return True

    def back(self) -> None:
        state = self.state
        state.mode = ViewMode.LIST
        state.detail_row = None
        state.detail_lines = []
        state.dirty = True

    def editor_target(self) -> RunEditor | None:
        """Describe the editor launch for the row under the cursor."""
        state = self.state
        row = state.detail_row if state.mode is ViewMode.DETAIL else self.current_row()
        if row is None:
            return None
        repo_path = self.entry_for(row).repo.path
        if isinstance(row, RepoRow):
            return RunEditor(target=repo_path, cwd=repo_path)
        return RunEditor(target=repo_path / row.path, cwd=repo_path)

    def on_editor_finished(self, event: EditorFinished) -> None:
        """Return to the list and rebuild from a fresh collection pass."""
        self.back()
        self.refresh()
        self.state.status_message = event.error or ""

    def handle_key(self, key: str) -> Effect | None:
        if self.state.mode is ViewMode.DETAIL:
            return self._handle_detail_key(key)
        return self._handle_list_key(key)

    def _handle_list_key(self, key: str) -> Effect | None:
        if key in QUIT_KEYS_LIST:
            return Quit()
        if key in {"UP", "k"}:
            self.move_cursor(-1)
        elif key in {"DOWN", "j"}:
            self.move_cursor(1)
        elif key in {"g", "HOME"}:
            self.jump_cursor(0)
        elif key in {"G", "END"}:
            self.jump_cursor(len(self.state.rows) - 1)
        elif key in SELECT_KEYS:
            self.select()
        elif key == "e":
            return self.editor_target()
        elif key == "r":
            self.refresh()
        return None

    def _handle_detail_key(self, key: str) -> Effect | None:
        state = self.state
        if key == "CTRL_C":
            return Quit()
        if key in BACK_KEYS_DETAIL:
            self.back()
            return None
        if key == "e":
            return self.editor_target()
        if key == "PAGE_UP":
            state.detail_scroll.page_up()
        elif key == "PAGE_DOWN":
            state.detail_scroll.page_down()
        elif not state.detail_scroll.handle_key(key):
            return None
        state.dirty = True
        return None


__all__ = [
    "BrowserState",
    "EditorFinished",
    "Effect",
    "Quit",
    "RunEditor",
    "StatusBrowser",
    "ViewMode",
]
