"""Formatting helpers shared by the list and status tables."""

import os

from git_worktree_keeper.constants import OUTPUT_COLORS, SHORT_HEAD_LENGTH


def format_short_head(head: str) -> str:
    """Abbreviate a commit hash to its first seven characters."""
    return head[:SHORT_HEAD_LENGTH]


def format_relative_path(path: str, project_root: str) -> str:
    """Show a worktree path relative to the project root when possible."""
    try:
        rel = os.path.relpath(path, project_root)
    except ValueError:
        # Different drives on Windows
        return path
    if rel.startswith(os.pardir):
        return path
    return rel


def format_dirty(dirty: bool) -> str:
    """Colored clean/dirty marker."""
    if dirty:
        return f"[{OUTPUT_COLORS['warning']}]dirty[/{OUTPUT_COLORS['warning']}]"
    return f"[{OUTPUT_COLORS['success']}]clean[/{OUTPUT_COLORS['success']}]"


__all__ = [
    "format_short_head",
    "format_relative_path",
    "format_dirty",
]
