"""Data models for git-worktree-keeper."""

from .worktree import WorktreeInfo, BehindCount, UpstreamState, SyncResult, PruneResult
from .template import FileKind, TemplateVars, worktree_name_from_branch, sanitize_database_name

__all__ = [
    "WorktreeInfo",
    "BehindCount",
    "UpstreamState",
    "SyncResult",
    "PruneResult",
    "FileKind",
    "TemplateVars",
    "worktree_name_from_branch",
    "sanitize_database_name",
]
