"""Pytest fixtures for git-worktree-keeper tests"""
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import git
import pytest
from rich.console import Console

from git_worktree_keeper.config import ProjectConfig
from git_worktree_keeper.constants import (
    REMOTE_FETCH_REFSPEC,
    SYMBOL_ERROR,
    SYMBOL_STEP,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
)
from git_worktree_keeper.exceptions import GitCommandFailed, UserAbortError
from git_worktree_keeper.models.worktree import BehindCount, UpstreamState, WorktreeInfo
from git_worktree_keeper.services.display_service import DisplayService


class RecordingDisplay(DisplayService):
    """DisplayService that keeps every message for assertions."""

    def __init__(self):
        super().__init__(Console(record=True, width=200, color_system=None))
        self.messages: List[str] = []

    def _print(self, style, text):
        message = text
        for symbol in (SYMBOL_SUCCESS, SYMBOL_ERROR, SYMBOL_WARNING, SYMBOL_STEP):
            if message.startswith(f"{symbol} "):
                message = message[len(symbol) + 1:]
                break
        self.messages.append(message)
        super()._print(style, text)

    def command(self, command_line):
        self.messages.append(f"$ {command_line}")
        super().command(command_line)

    def stream(self, line):
        self.messages.append(line)
        super().stream(line)

    @property
    def text(self) -> str:
        return "\n".join(self.messages)


class FakeGit:
    """In-memory GitBackend returning canned answers and recording calls."""

    def __init__(
        self,
        worktrees: Optional[List[WorktreeInfo]] = None,
        remote_branches: Optional[List[str]] = None,
        default_branch: str = "main",
        dry_run: bool = False,
    ):
        self.dry_run = dry_run
        self.worktrees = list(worktrees or [])
        self.remote_branches = list(remote_branches or [])
        self.default_branch = default_branch
        self.merged = set()
        self.dirty = set()
        self.behind: Dict[str, BehindCount] = {}
        self.ages: Dict[str, str] = {}
        # Names of operations that should fail, keyed by branch or path
        self.failures: Dict[str, set] = {}
        self.calls: List[tuple] = []

    def fail(self, operation: str, key: str):
        self.failures.setdefault(operation, set()).add(key)

    def _call(self, operation: str, *args):
        self.calls.append((operation, *args))
        key = args[0] if args else ""
        if key in self.failures.get(operation, set()) or "*" in self.failures.get(operation, set()):
            raise GitCommandFailed(f"git {operation} {key}".strip(), 1, f"fatal: {operation} failed")

    def called(self, operation: str) -> List[tuple]:
        return [c[1:] for c in self.calls if c[0] == operation]

    def clone_bare(self, url, dest):
        self._call("clone_bare", url, dest)

    def configure_remote_fetch(self):
        self._call("configure_remote_fetch")

    def fetch(self, remote):
        self._call("fetch", remote)

    def fetch_all(self):
        self._call("fetch_all")

    def list_remote_branches(self):
        self._call("list_remote_branches")
        return list(self.remote_branches)

    def has_remote_branch(self, branch):
        return branch in self.remote_branches

    def worktree_add(self, path, branch):
        self._call("worktree_add", path, branch)
        self._create(path, branch)

    def set_upstream(self, branch):
        self._call("set_upstream", branch)

    def worktree_add_new(self, path, branch):
        self._call("worktree_add_new", path, branch)
        self._create(path, branch)

    def _create(self, path, branch):
        if self.dry_run:
            return
        os.makedirs(path, exist_ok=True)
        self.worktrees.append(WorktreeInfo(path=str(path), branch=branch, head="f" * 40))

    def worktree_remove(self, path, force=False):
        self._call("worktree_remove", path, force)
        if not self.dry_run:
            self.worktrees = [wt for wt in self.worktrees if wt.path != path]

    def worktree_list(self):
        self._call("worktree_list")
        return list(self.worktrees)

    def worktree_prune(self):
        self._call("worktree_prune")

    def branch_delete(self, branch, force=False):
        self._call("branch_delete", branch, force)

    def is_worktree_dirty(self, worktree_path):
        self._call("is_worktree_dirty", worktree_path)
        return worktree_path in self.dirty

    def is_branch_merged(self, branch, target):
        self._call("is_branch_merged", branch, target)
        return branch in self.merged

    def get_default_branch(self):
        return self.default_branch

    def get_last_commit_age(self, worktree_path):
        return self.ages.get(worktree_path, "2 days ago")

    def get_behind_count(self, worktree_path):
        self._call("get_behind_count", worktree_path)
        return self.behind.get(worktree_path, BehindCount(UpstreamState.TRACKING, 0))

    def pull(self, worktree_path):
        self._call("pull", worktree_path)

    def pull_rebase(self, worktree_path):
        self._call("pull_rebase", worktree_path)


class ScriptedPrompter:
    """Prompter answering from canned values; None means the user cancelled."""

    def __init__(self, branch=None, worktree=None, editor=None, confirm=True, text=None):
        self.answers = {
            "branch": branch,
            "worktree": worktree,
            "editor": editor,
            "confirm": confirm,
            "text": text,
        }
        self.asked: List[tuple] = []

    def _answer(self, kind, prompt):
        self.asked.append((kind, prompt))
        value = self.answers[kind]
        if value is None:
            raise UserAbortError()
        return value

    def select_branch(self, branches):
        return self._answer("branch", branches)

    def select_worktree(self, names):
        return self._answer("worktree", names)

    def select_editor(self, editors):
        return self._answer("editor", editors)

    def confirm(self, title):
        return self._answer("confirm", title)

    def input_text(self, title, placeholder=""):
        return self._answer("text", title)


def wt(project_root: Path, branch: str, head: str = "a" * 40) -> WorktreeInfo:
    """Worktree record under <project>/worktrees/<branch>."""
    return WorktreeInfo(path=str(project_root / "worktrees" / branch), branch=branch, head=head)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def display():
    """Create a recording display."""
    return RecordingDisplay()


@pytest.fixture
def prompter():
    """Create a prompter that confirms and cancels everything else."""
    return ScriptedPrompter()


@pytest.fixture
def project_root(temp_dir):
    """Create an empty project directory with the standard layout."""
    root = temp_dir / "proj"
    (root / "worktrees").mkdir(parents=True)
    (root / "shared" / "copy").mkdir(parents=True)
    (root / "shared" / "symlink").mkdir(parents=True)
    ProjectConfig().save(root)
    return root


def _configure_identity(repo):
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")


@pytest.fixture
def origin_repo(temp_dir):
    """Create a regular repository acting as the remote.

    Branches: main, feature/done (merged into main), feature/active (not merged).
    """
    repo_path = temp_dir / "origin"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)
    _configure_identity(repo)

    (repo_path / "README.md").write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.git.branch("-M", "main")

    repo.git.checkout("-b", "feature/done")
    (repo_path / "done.txt").write_text("done\n")
    repo.index.add(["done.txt"])
    repo.index.commit("Finished feature")

    repo.git.checkout("main")
    repo.git.merge("feature/done", "--no-ff", "-m", "Merge feature/done")

    repo.git.checkout("-b", "feature/active")
    (repo_path / "active.txt").write_text("active\n")
    repo.index.add(["active.txt"])
    repo.index.commit("Work in progress")

    repo.git.checkout("main")

    yield repo

    repo.close()


@pytest.fixture
def bare_project(temp_dir, origin_repo):
    """Create a project with a bare clone of origin_repo in .bare.

    Returns the project root.
    """
    root = temp_dir / "proj"
    root.mkdir()
    bare = git.Repo.clone_from(origin_repo.working_dir, str(root / ".bare"), bare=True)
    bare.git.config("remote.origin.fetch", REMOTE_FETCH_REFSPEC)
    bare.git.fetch("origin")
    _configure_identity(bare)
    bare.close()

    for sub in ("worktrees", "shared/copy", "shared/symlink"):
        (root / sub).mkdir(parents=True)
    ProjectConfig().save(root)
    return root
