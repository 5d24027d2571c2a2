"""Interactive event loop and one-shot snapshot printing.

The loop is single-threaded: each key is handled completely before the next
is read. Terminal size is re-read every iteration, so resizes only trigger a
redraw. Effects returned by the view state machine are performed here.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from typing import TextIO

from .collector import collect_snapshot
from .discovery import Repo
from .editor import launch_editor
from .highlight import diff_lines
from .input import read_key
from .layout import render_snapshot_text
from .render import render_frame
from .rows import flatten_rows
from .state import EditorFinished, Quit, RunEditor, StatusBrowser
from .terminal import TerminalController
from .ui_theme import UITheme, resolve_theme

logger = logging.getLogger(__name__)

UNBOUNDED_WIDTH = 10_000


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_poll_ms: int = 120


def run_main_loop(
    browser: StatusBrowser,
    terminal: TerminalController,
    stdin_fd: int,
    theme: UITheme,
    run_editor: Callable[[RunEditor], str | None],
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> None:
    """Run the interactive loop until the state machine asks to quit."""
    state = browser.state
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                state.dirty = True
            if state.dirty:
                terminal.write_frame(render_frame(state, theme, term.columns, term.lines))
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=timing.key_poll_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            if state.status_message:
                state.status_message = ""
                state.dirty = True
            if key == "CTRL_L":
                state.dirty = True
                continue

            effect = browser.handle_key(key)
            if isinstance(effect, Quit):
                break
            if isinstance(effect, RunEditor):
                error = run_editor(effect)
                if error:
                    logger.info("editor session for %s: %s", effect.target, error)
                browser.on_editor_finished(EditorFinished(error=error))


def print_snapshot(
    repos: Sequence[Repo],
    stream: TextIO,
    theme: UITheme,
    width: int = UNBOUNDED_WIDTH,
) -> None:
    """Collect once and write the aligned status listing to ``stream``."""
    entries = collect_snapshot(repos)
    rows = flatten_rows(entries)
    stream.write(render_snapshot_text(entries, rows, width, theme))
    stream.flush()


def _open_key_input() -> tuple[int, bool]:
    """Return a key-input fd, reopening the controlling tty when stdin is piped."""
    stdin_fd = sys.stdin.fileno()
    if os.isatty(stdin_fd):
        return stdin_fd, False
    return os.open("/dev/tty", os.O_RDONLY), True


def run_interactive(repos: Sequence[Repo], timing: RuntimeLoopTiming = RuntimeLoopTiming()) -> None:
    """Open the full-screen browser over ``repos``."""
    theme = resolve_theme(no_color=False)
    try:
        key_fd, owns_fd = _open_key_input()
    except OSError as exc:
        logger.warning("no terminal for key input (%s); printing one snapshot", exc)
        print_snapshot(repos, sys.stdout, theme, shutil.get_terminal_size((80, 24)).columns)
        return
    try:
        terminal = TerminalController(stdin_fd=key_fd, stdout_fd=sys.stdout.fileno())
        browser = StatusBrowser(
            collect=partial(collect_snapshot, list(repos)),
            format_diff=partial(diff_lines, colorize=theme.colorized),
        )

        def run_editor(effect: RunEditor) -> str | None:
            return launch_editor(
                effect.target,
                terminal.suspended,
                cwd=effect.cwd,
                stdin=key_fd if owns_fd else None,
            )

        run_main_loop(browser, terminal, key_fd, theme, run_editor, timing)
    finally:
        if owns_fd:
            os.close(key_fd)


__all__ = [
    "RuntimeLoopTiming",
    "print_snapshot",
    "run_interactive",
    "run_main_loop",
]
