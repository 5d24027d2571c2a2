"""Editor launch helper for the scoped editor hand-off.

Runs the user's editor while the TUI is suspended and reports the outcome as
an error string instead of raising, so the UI can show it transiently.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


def editor_command(environ: Mapping[str, str] | None = None) -> list[str]:
    """Resolve the editor argv from ``$VISUAL``/``$EDITOR`` with a ``vi`` fallback."""
    environ = os.environ if environ is None else environ
    for name in ("VISUAL", "EDITOR"):
        value = environ.get(name, "").strip()
        if value:
            return shlex.split(value)
    return [DEFAULT_EDITOR]


def launch_editor(
    target: Path,
    suspend: Callable[[], AbstractContextManager[object]],
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
    stdin: int | None = None,
) -> str | None:
    """Run the editor on ``target`` inside ``suspend()``; return an error message or ``None``."""
    try:
        cmd = editor_command(environ)
    except ValueError as exc:
        return f"Cannot edit: bad editor command ({exc})"
    if not cmd:
        return "Cannot edit: editor command is empty."

    with suspend():
        try:
            proc = subprocess.run([*cmd, str(target)], cwd=cwd, stdin=stdin, check=False)
        except OSError as exc:
            logger.warning("failed to launch editor %r: %s", cmd[0], exc)
            return f"Failed to launch editor: {exc}"
    if proc.returncode != 0:
        return f"Editor exited with status {proc.returncode}"
    return None
