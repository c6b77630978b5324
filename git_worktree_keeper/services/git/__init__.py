"""Git command layer: runner, capability interface and output parsers."""

from .backend import GitBackend
from .runner import GitRunner, format_command
from .parsers import (
    parse_behind_count,
    parse_default_branch,
    parse_dirty_status,
    parse_remote_branches,
    parse_worktree_list,
)

__all__ = [
    "GitBackend",
    "GitRunner",
    "format_command",
    "parse_behind_count",
    "parse_default_branch",
    "parse_dirty_status",
    "parse_remote_branches",
    "parse_worktree_list",
]
