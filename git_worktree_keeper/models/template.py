"""Template variable models."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from git_worktree_keeper.constants import (
    PLACEHOLDER_BRANCH_NAME,
    PLACEHOLDER_DATABASE_NAME,
    PLACEHOLDER_WORKTREE_NAME,
    PLACEHOLDER_WORKTREE_PATH,
)


class FileKind(Enum):
    """How a shared file is materialized into a worktree."""
    PLAIN = "plain"
    TEMPLATE = "template"
    BINARY = "binary"


def worktree_name_from_branch(branch: str) -> str:
    """Turn a branch name into a flat worktree identifier.

    >>> worktree_name_from_branch("feature/login")
    'feature-login'
    """
    return branch.replace("/", "-")


def sanitize_database_name(name: str) -> str:
    """Lowercase and replace '-' and '.' with '_' for restrictive resource names."""
    return name.lower().replace("-", "_").replace(".", "_")


@dataclass(frozen=True)
class TemplateVars:
    """Values substituted into template files for one worktree."""

    worktree_name: str
    worktree_path: str
    branch_name: str
    database_name: str

    @classmethod
    def for_worktree(cls, worktree_path: str, branch_name: str) -> "TemplateVars":
        name = worktree_name_from_branch(branch_name)
        return cls(
            worktree_name=name,
            worktree_path=str(worktree_path),
            branch_name=branch_name,
            database_name=sanitize_database_name(name),
        )

    def as_mapping(self) -> Dict[str, str]:
        """Placeholder token -> value."""
        return {
            PLACEHOLDER_WORKTREE_NAME: self.worktree_name,
            PLACEHOLDER_WORKTREE_PATH: self.worktree_path,
            PLACEHOLDER_BRANCH_NAME: self.branch_name,
            PLACEHOLDER_DATABASE_NAME: self.database_name,
        }
