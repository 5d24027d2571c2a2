"""Diff text preparation for the detail view.

Neutralizes terminal control bytes, then colorizes unified diffs with the
Pygments ``DiffLexer``.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import DiffLexer

NO_DIFF_TEXT = "(no diff)"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=1)
def _diff_formatter() -> TerminalFormatter:
    return TerminalFormatter(bg="dark")


def colorize_diff(diff_text: str) -> str:
    return pygments_highlight(diff_text, DiffLexer(), _diff_formatter())


def diff_lines(diff_text: str, colorize: bool) -> list[str]:
    """Split diff text into display lines, substituting a placeholder when empty."""
    text = sanitize_terminal_text(diff_text).replace("\r\n", "\n")
    if not text.strip():
        return [NO_DIFF_TEXT]
    if colorize:
        text = colorize_diff(text)
    return text.rstrip("\n").split("\n")


__all__ = ["NO_DIFF_TEXT", "colorize_diff", "diff_lines", "sanitize_terminal_text"]
