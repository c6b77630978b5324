"""Worktree data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass
class WorktreeInfo:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch: str = ""  # Empty for detached or bare entries
    head: str = ""
    is_bare: bool = False

    @property
    def is_detached(self) -> bool:
        """True for a non-bare entry with no branch checked out."""
        return not self.is_bare and not self.branch

    def __str__(self) -> str:
        """String representation of worktree."""
        if self.is_bare:
            return f"(bare) @ {self.path}"
        return f"{self.branch or '(detached)'} @ {self.path}"


class UpstreamState(Enum):
    """Whether a worktree's branch has a resolvable upstream."""
    TRACKING = "tracking"
    NO_UPSTREAM = "no-upstream"


@dataclass
class BehindCount:
    """Result of an upstream behind-count query."""

    state: UpstreamState
    count: int = 0

    @property
    def has_upstream(self) -> bool:
        return self.state is UpstreamState.TRACKING


@dataclass
class SyncResult:
    """Aggregate counters of a sync run."""

    updated: int = 0
    skipped: int = 0
    failed: int = 0
    up_to_date: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


@dataclass
class PruneResult:
    """Outcome of a prune run."""

    candidates: List[WorktreeInfo] = field(default_factory=list)
    removed: List[WorktreeInfo] = field(default_factory=list)
    cancelled: bool = False

    @property
    def removed_count(self) -> int:
        return len(self.removed)
