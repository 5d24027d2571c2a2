"""Viewport scroll state over a precomputed sequence of lines.

The offset invariant ``0 <= offset <= max(total - height, 0)`` holds after
every method. ``visible_slice`` re-reads ``total`` on each render, which is how
terminal resizes are absorbed without a dedicated resize handler.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


def keep_cursor_visible(cursor: int, total: int, height: int) -> int:
    """Return the smallest offset showing ``cursor`` with one line of context below.

    The cursor ends up within ``[offset, offset + height - 2]``; the result is
    clamped to ``[0, max(total - height, 0)]``.
    """
    if height <= 0 or total <= height:
        return 0
    trailing = 1 if height >= 2 else 0
    offset = max(0, cursor - (height - 1 - trailing))
    return min(offset, max(total - height, 0))


@dataclass
class ViewportScroll:
    offset: int = 0
    total: int = 0
    height: int = 0

    def max_offset(self) -> int:
        return max(self.total - self.height, 0)

    def clamp(self) -> None:
        self.offset = max(0, min(self.offset, self.max_offset()))

    def move_up(self) -> None:
        self.offset = max(self.offset - 1, 0)
        self.clamp()

    def move_down(self) -> None:
        self.offset = min(self.offset + 1, self.max_offset())
        self.clamp()

    def page_up(self) -> None:
        self.offset -= max(1, self.height - 1)
        self.clamp()

    def page_down(self) -> None:
        self.offset += max(1, self.height - 1)
        self.clamp()

    def jump_top(self) -> None:
        self.offset = 0

    def jump_bottom(self) -> None:
        self.offset = self.max_offset()

    def resize(self, height: int) -> None:
        self.height = max(0, height)
        self.clamp()

    def visible_slice(self, lines: Sequence[T]) -> list[T]:
        """Return the lines inside the viewport after refreshing ``total``."""
        self.total = len(lines)
        self.clamp()
        return list(lines[self.offset : self.offset + self.height])

    def percent(self) -> str:
        """Return ``" · 42%"`` for the scroll position, or ``""`` if nothing scrolls."""
        max_offset = self.max_offset()
        if max_offset <= 0:
            return ""
        return f" · {100 * self.offset // max_offset}%"

    def handle_key(self, key: str) -> bool:
        """Apply a common scroll key; return whether it was consumed."""
        if key in {"UP", "k"}:
            self.move_up()
        elif key in {"DOWN", "j"}:
            self.move_down()
        elif key in {"CTRL_U", "u"}:
            self.page_up()
        elif key in {"CTRL_D", "d", " "}:
            self.page_down()
        elif key == "g":
            self.jump_top()
        elif key == "G":
            self.jump_bottom()
        else:
            return False
        return True


__all__ = ["ViewportScroll", "keep_cursor_visible"]
