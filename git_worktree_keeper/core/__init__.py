"""Core lifecycle logic for git-worktree-keeper"""

from .worktree_keeper import WorktreeKeeper
from .bootstrap import annotate_config, clone_project, init_project

__all__ = ["WorktreeKeeper", "annotate_config", "clone_project", "init_project"]
