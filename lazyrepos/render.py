"""Full-screen frame composition for the list and detail views.

Frames are built as strings from view state and an injected theme; writing
them to the terminal is the event loop's job.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import clip_ansi_line
from .layout import LayoutEngine, with_group_breaks
from .scroll import keep_cursor_visible
from .state import BrowserState, ViewMode
from .ui_theme import UITheme

CURSOR_MARK = "▸ "
GUTTER = "  "
CHROME_ROWS = 2
LIST_HELP = ("↑/↓ move", "enter diff", "e edit", "r refresh", "q quit")
DETAIL_HELP = ("↑/↓ scroll", "g/G top/bottom", "e edit", "q back")
EMPTY_LIST_TEXT = "No git repos found."


def content_rows(height: int) -> int:
    return max(1, height - CHROME_ROWS)


def render_help(theme: UITheme, parts: Sequence[str], suffix: str = "") -> str:
    return theme.paint(theme.faint, " · ".join(parts) + suffix)


def _frame(lines: Sequence[str], width: int) -> str:
    out: list[str] = ["\033[H\033[J"]
    line_width = max(1, width - 1)
    for index, line in enumerate(lines):
        if index:
            out.append("\r\n")
        clipped = clip_ansi_line(line, line_width)
        out.append(clipped)
        if "\033" in clipped:
            out.append("\033[0m")
    return "".join(out)


def build_list_lines(state: BrowserState, theme: UITheme, width: int, height: int) -> list[str]:
    """Compose list-view screen lines and update the list scroll position."""
    entries = state.entries
    dirty_count = sum(1 for entry in entries if not entry.is_clean)
    header = theme.paint(theme.bold, "lazyrepos") + theme.paint(
        theme.faint, f"  {len(entries)} repos · {dirty_count} dirty"
    )
    rows_height = content_rows(height)

    if not state.rows:
        body = [theme.paint(theme.faint, GUTTER + EMPTY_LIST_TEXT)]
        cursor_line = -1
    else:
        layout = LayoutEngine(theme)
        lines = layout.render(entries, state.rows, max(1, width - len(GUTTER) - 1), state.collected_at)
        display_lines, row_lines = with_group_breaks(entries, state.rows, lines)
        cursor_line = row_lines[state.cursor]
        decorated = [
            (theme.paint(theme.cursor, CURSOR_MARK) if index == cursor_line else GUTTER) + line
            for index, line in enumerate(display_lines)
        ]
        scroll = state.list_scroll
        scroll.resize(rows_height)
        scroll.offset = keep_cursor_visible(cursor_line, len(decorated), rows_height)
        body = scroll.visible_slice(decorated)

    body = body + [""] * (rows_height - len(body))
    if state.status_message:
        footer = theme.paint(theme.status_message, state.status_message)
    else:
        footer = render_help(theme, LIST_HELP, state.list_scroll.percent())
    return [header, *body, footer]


def build_detail_lines(state: BrowserState, theme: UITheme, height: int) -> list[str]:
    title = theme.paint(theme.detail_title, state.detail_title)
    rows_height = content_rows(height)
    scroll = state.detail_scroll
    scroll.resize(rows_height)
    body = scroll.visible_slice(state.detail_lines)
    body = body + [""] * (rows_height - len(body))
    footer = render_help(theme, DETAIL_HELP, scroll.percent())
    return [title, *body, footer]


def render_frame(state: BrowserState, theme: UITheme, width: int, height: int) -> str:
    """Return the complete escape-sequence frame for the current view."""
    if state.mode is ViewMode.DETAIL:
        lines = build_detail_lines(state, theme, height)
    else:
        lines = build_list_lines(state, theme, width, height)
    return _frame(lines, width)


__all__ = [
    "build_detail_lines",
    "build_list_lines",
    "content_rows",
    "render_frame",
    "render_help",
]
