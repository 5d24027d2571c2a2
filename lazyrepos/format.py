"""Width-aware text formatting shared by every list view.

``ListItem``/``dot_line`` implement the "label ····· suffix" row shape; the
truncation helpers elide with a single ellipsis measured in display cells.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .ansi import display_width, take_prefix

ELLIPSIS = "…"
LEADER_CHAR = "·"
MIN_LEADER_WIDTH = 3


def relative_time(moment: datetime | None, now: datetime) -> str:
    """Format ``moment`` as a compact age relative to ``now``."""
    if moment is None:
        return ""
    seconds = (now - moment).total_seconds()
    minute = 60
    hour = 60 * minute
    day = 24 * hour
    if seconds < minute:
        return "now"
    if seconds < hour:
        return f"{int(seconds // minute)}m"
    if seconds < day:
        return f"{int(seconds // hour)}h"
    if seconds < 7 * day:
        return f"{int(seconds // day)}d"
    if seconds < 30 * day:
        return f"{int(seconds // (7 * day))}w"
    if seconds < 365 * day:
        return f"{int(seconds // (30 * day))}mo"
    return f"{int(seconds // (365 * day))}y"


def truncate(text: str, max_cols: int) -> str:
    """Shorten ``text`` to ``max_cols`` cells, ending with an ellipsis if cut."""
    if max_cols <= 0:
        return ""
    if display_width(text) <= max_cols:
        return text
    return take_prefix(text, max_cols - 1) + ELLIPSIS


def truncate_path(path: str, max_cols: int) -> str:
    """Shorten a slash-separated path, keeping the final segment when it fits.

    ``src/pkg/deeply/nested/module.py`` at 20 cells becomes
    ``src/pkg/d…/module.py``. A filename too long on its own is cut at the
    end like :func:`truncate`.
    """
    if max_cols <= 0:
        return ""
    if display_width(path) <= max_cols:
        return path

    head, sep, name = path.rpartition("/")
    if not sep:
        return truncate(path, max_cols)
    tail = f"{ELLIPSIS}/{name}"
    tail_width = display_width(tail)
    if tail_width > max_cols:
        return truncate(name, max_cols)
    return take_prefix(head, max_cols - tail_width) + tail


def leader(width: int) -> str:
    """Return a dot leader ``width`` cells wide, padded by one space each side."""
    width = max(width, MIN_LEADER_WIDTH)
    return " " + LEADER_CHAR * (width - 2) + " "


def leader_width(available: int, left_width: int, right_width: int) -> int:
    return max(available - left_width - right_width, MIN_LEADER_WIDTH)


def dot_line(left: str, right: str, width: int, leader_style: str = "", reset: str = "") -> str:
    """Build ``left ····· right`` so the line spans ``width`` cells.

    Widths are measured on the printed text, so ``left``/``right`` may carry
    ANSI styling. The leader never shrinks below three cells.
    """
    fill = leader(leader_width(width, display_width(left), display_width(right)))
    if leader_style:
        fill = f"{leader_style}{fill}{reset}"
    return f"{left}{fill}{right}"


@dataclass(frozen=True)
class ListItem:
    """One "label + dot leader + right-aligned suffix" list line."""

    label: str
    suffix: str = ""

    def render(self, width: int, leader_style: str = "", reset: str = "") -> str:
        if not self.suffix:
            return self.label
        return dot_line(self.label, self.suffix, width, leader_style, reset)


def pad_right(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to ``width`` display cells."""
    return text + " " * max(0, width - display_width(text))


__all__ = [
    "ELLIPSIS",
    "LEADER_CHAR",
    "ListItem",
    "MIN_LEADER_WIDTH",
    "dot_line",
    "leader",
    "leader_width",
    "pad_right",
    "relative_time",
    "truncate",
    "truncate_path",
]
