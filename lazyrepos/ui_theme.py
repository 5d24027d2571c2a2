"""UI theme definitions and selection helpers.

Themes are plain ANSI palettes passed explicitly into renderers; nothing in
the rendering path reads process-wide style state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    bold: str
    faint: str
    cursor: str
    branch_dirty: str
    ahead: str
    behind: str
    tag: str
    file_added: str
    file_modified: str
    file_mixed: str
    file_deleted: str
    file_untracked: str
    status_message: str
    detail_title: str

    @property
    def colorized(self) -> bool:
        return bool(self.reset)

    def paint(self, style: str, text: str) -> str:
        """Wrap ``text`` in ``style`` unless either is empty."""
        if not style or not text:
            return text
        return f"{style}{text}{self.reset}"


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    bold="\033[1m",
    faint="\033[2m",
    cursor="\033[1;35m",
    branch_dirty="\033[36m",
    ahead="\033[32m",
    behind="\033[31m",
    tag="\033[33m",
    file_added="\033[32m",
    file_modified="\033[33m",
    file_mixed="\033[36m",
    file_deleted="\033[31m",
    file_untracked="\033[31m",
    status_message="\033[38;5;214m",
    detail_title="\033[1;34m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    bold="",
    faint="",
    cursor="",
    branch_dirty="",
    ahead="",
    behind="",
    tag="",
    file_added="",
    file_modified="",
    file_mixed="",
    file_deleted="",
    file_untracked="",
    status_message="",
    detail_title="",
)


def resolve_theme(*, no_color: bool = False) -> UITheme:
    """Return concrete theme for the requested color mode."""
    if no_color:
        return PLAIN_THEME
    return DEFAULT_THEME


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "resolve_theme",
]
