"""Command-line front door for lazyrepos.

Discovers repositories, then either prints one status snapshot or opens the
interactive list/detail browser.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from collections.abc import Mapping

from .discovery import discover_repos
from .errors import DiscoveryError
from .runtime import UNBOUNDED_WIDTH, print_snapshot, run_interactive
from .ui_theme import resolve_theme

NO_REPOS_MESSAGE = "No git repos found."
DEBUG_LOG_ENV = "LAZYREPOS_DEBUG_LOG"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _stdout_is_tty() -> bool:
    try:
        return os.isatty(sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        return False


def configure_logging(environ: Mapping[str, str] | None = None) -> None:
    """Send debug logs to the file named by ``$LAZYREPOS_DEBUG_LOG``, else discard them.

    Logging must never reach the terminal while the full-screen view owns it.
    """
    environ = os.environ if environ is None else environ
    log_path = environ.get(DEBUG_LOG_ENV, "").strip()
    if log_path:
        logging.basicConfig(filename=log_path, level=logging.DEBUG, format=LOG_FORMAT)
    else:
        logging.getLogger("lazyrepos").addHandler(logging.NullHandler())


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and show status for every discovered repository.

    Exits non-zero only when discovery itself fails.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Show git status for the current directory and its child repositories. "
            "Pipe name<TAB>path lines to choose repositories explicitly."
        )
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="Print one status snapshot and exit instead of opening the interactive view.",
    )
    args = parser.parse_args(argv)

    configure_logging()

    try:
        repos = discover_repos()
    except DiscoveryError as exc:
        raise SystemExit(f"error: {exc}") from exc

    if not repos:
        print(NO_REPOS_MESSAGE)
        return

    interactive_output = _stdout_is_tty()
    if args.list or not interactive_output:
        width = shutil.get_terminal_size((80, 24)).columns if interactive_output else UNBOUNDED_WIDTH
        print_snapshot(repos, sys.stdout, resolve_theme(no_color=not interactive_output), width)
        return

    run_interactive(repos)


if __name__ == "__main__":
    main()
