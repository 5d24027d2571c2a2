"""ANSI-aware text measurement and clipping utilities.

All widths are terminal display cells: East Asian wide characters take two
cells and combining marks take none. Escape sequences never count.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int = 0) -> int:
    """Cells taken by ``ch`` when printed at column ``col``.

    Tabs run to the next stop of 8. Combining marks and format characters
    take none; East Asian wide and fullwidth characters take two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch) or unicodedata.category(ch) == "Cf":
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies once printed."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def take_prefix(text: str, max_cols: int) -> str:
    """Return the longest leading run of plain ``text`` within ``max_cols`` cells."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut a styled line at ``max_cols`` cells, keeping every escape it passes.

    Tabs become spaces so the cut matches what the terminal shows.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        if col >= max_cols:
            break
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)
