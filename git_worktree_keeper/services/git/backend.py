"""Capability interface the lifecycle engine uses to talk to git."""

from typing import List, Protocol

from git_worktree_keeper.models.worktree import BehindCount, WorktreeInfo


class GitBackend(Protocol):
    """Everything the worktree lifecycle needs from git.

    `GitRunner` is the real implementation; tests substitute a fake that
    returns canned values.
    """

    dry_run: bool

    def clone_bare(self, url: str, dest: str) -> None: ...

    def configure_remote_fetch(self) -> None: ...

    def fetch(self, remote: str) -> None: ...

    def fetch_all(self) -> None: ...

    def list_remote_branches(self) -> List[str]: ...

    def has_remote_branch(self, branch: str) -> bool: ...

    def worktree_add(self, path: str, branch: str) -> None: ...

    def set_upstream(self, branch: str) -> None: ...

    def worktree_add_new(self, path: str, branch: str) -> None: ...

    def worktree_remove(self, path: str, force: bool = False) -> None: ...

    def worktree_list(self) -> List[WorktreeInfo]: ...

    def worktree_prune(self) -> None: ...

    def branch_delete(self, branch: str, force: bool = False) -> None: ...

    def is_worktree_dirty(self, worktree_path: str) -> bool: ...

    def is_branch_merged(self, branch: str, target: str) -> bool: ...

    def get_default_branch(self) -> str: ...

    def get_last_commit_age(self, worktree_path: str) -> str: ...

    def get_behind_count(self, worktree_path: str) -> BehindCount: ...

    def pull(self, worktree_path: str) -> None: ...

    def pull_rebase(self, worktree_path: str) -> None: ...
