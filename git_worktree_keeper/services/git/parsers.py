"""Parsers for git command output.

All functions here are pure: they take the text a git command printed and
return plain values. Empty input always yields an empty or zero result.
"""

from typing import Dict, List

from git_worktree_keeper.constants import (
    DEFAULT_REMOTE,
    HEAD_POINTER_MARKER,
    HEADS_PREFIX,
)
from git_worktree_keeper.models.worktree import WorktreeInfo


def parse_remote_branches(output: str, remote: str = DEFAULT_REMOTE) -> List[str]:
    """Parse `git branch -r` into short branch names.

    The symbolic HEAD entry ("origin/HEAD -> origin/main") is dropped and the
    remote prefix is stripped from every other line.
    """
    prefix = f"{remote}/"
    branches = []
    for line in output.split("\n"):
        line = line.strip()
        if not line or HEAD_POINTER_MARKER in line:
            continue
        if line.startswith(prefix):
            line = line[len(prefix):]
        branches.append(line)
    return branches


def parse_worktree_list(output: str) -> List[WorktreeInfo]:
    """Parse `git worktree list --porcelain`.

    Format (one block per worktree, blocks separated by a blank line):
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
    A bare repository entry carries a `bare` line instead of HEAD/branch.
    """
    worktrees: List[WorktreeInfo] = []
    current: Dict[str, object] = {}

    def close_block():
        if current.get("path"):
            worktrees.append(
                WorktreeInfo(
                    path=str(current["path"]),
                    branch=str(current.get("branch", "")),
                    head=str(current.get("head", "")),
                    is_bare=bool(current.get("bare", False)),
                )
            )
        current.clear()

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            close_block()
            continue

        if line.startswith("worktree "):
            # A new block without a separating blank line still starts fresh
            close_block()
            current["path"] = line[len("worktree "):]
        elif line.startswith("HEAD "):
            current["head"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            ref = line[len("branch "):]
            if ref.startswith(HEADS_PREFIX):
                ref = ref[len(HEADS_PREFIX):]
            current["branch"] = ref
        elif line == "bare":
            current["bare"] = True
        elif line == "detached":
            current["branch"] = ""

    # Last block when output has no trailing blank line
    close_block()
    return worktrees


def parse_dirty_status(output: str) -> bool:
    """Any non-whitespace `git status --porcelain` output means dirty."""
    return bool(output.strip())


def parse_default_branch(output: str, remote: str = DEFAULT_REMOTE) -> str:
    """Strip `refs/remotes/<remote>/` from a symbolic-ref result."""
    s = output.strip()
    prefix = f"refs/remotes/{remote}/"
    if s.startswith(prefix):
        s = s[len(prefix):]
    return s


def parse_behind_count(output: str) -> int:
    """Parse `git rev-list --count` output; anything malformed counts as zero."""
    try:
        return max(int(output.strip()), 0)
    except ValueError:
        return 0
