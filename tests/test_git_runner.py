"""Tests for GitRunner against real repositories"""
from unittest.mock import patch

import git
import pytest
from git.exc import GitCommandNotFound

from git_worktree_keeper.exceptions import GitCommandFailed, GitNotFoundError
from git_worktree_keeper.models.worktree import UpstreamState
from git_worktree_keeper.services.git.runner import GitRunner, format_command


@pytest.fixture
def runner(bare_project, display):
    """Create a live runner on the bare project."""
    return GitRunner(str(bare_project / ".bare"), display)


@pytest.fixture
def main_worktree(runner, bare_project):
    """Create a worktree for main tracking origin/main."""
    path = bare_project / "worktrees" / "main"
    runner.worktree_add(str(path), "main")
    git.Git(str(path)).branch("--set-upstream-to=origin/main")
    return path


class TestFormatCommand:
    """Test command line rendering."""

    def test_quotes_arguments(self):
        """Test arguments with spaces are quoted."""
        assert format_command(["commit", "-m", "two words"]) == "git commit -m 'two words'"

    def test_plain(self):
        """Test simple arguments are left alone."""
        assert format_command(["worktree", "list", "--porcelain"]) == "git worktree list --porcelain"


class TestRunnerQueries:
    """Test read-only operations."""

    def test_worktree_list_includes_bare(self, runner, bare_project):
        """Test the bare repository is listed and flagged."""
        worktrees = runner.worktree_list()
        assert len(worktrees) == 1
        assert worktrees[0].is_bare is True

    def test_list_remote_branches(self, runner):
        """Test remote branches come back without the origin prefix."""
        branches = runner.list_remote_branches()
        assert set(branches) == {"main", "feature/done", "feature/active"}
        assert runner.has_remote_branch("feature/done") is True
        assert runner.has_remote_branch("nope") is False

    def test_default_branch_falls_back_to_main(self, runner):
        """Test a bare clone without origin/HEAD resolves main."""
        assert runner.get_default_branch() == "main"

    def test_default_branch_from_origin_head(self, runner, bare_project):
        """Test origin/HEAD wins when set."""
        git.Git().execute(
            ["git", "--git-dir", str(bare_project / ".bare"), "symbolic-ref",
             "refs/remotes/origin/HEAD", "refs/remotes/origin/feature/active"]
        )
        assert runner.get_default_branch() == "feature/active"

    def test_is_branch_merged(self, runner):
        """Test ancestry: exit 0 is merged, exit 1 is not."""
        assert runner.is_branch_merged("feature/done", "main") is True
        assert runner.is_branch_merged("feature/active", "main") is False

    def test_is_branch_merged_unknown_branch(self, runner):
        """Test an unknown ref is a real failure, not a negative answer."""
        with pytest.raises(GitCommandFailed) as exc_info:
            runner.is_branch_merged("does-not-exist", "main")
        assert exc_info.value.status not in (0, 1)
        assert "merge-base --is-ancestor does-not-exist main" in exc_info.value.command

    def test_queries_run_in_dry_run(self, bare_project, display):
        """Test read-only queries still execute in preview mode."""
        runner = GitRunner(str(bare_project / ".bare"), display, dry_run=True)
        assert "main" in runner.list_remote_branches()
        assert not any("[dry-run]" in m for m in display.messages)


class TestRunnerMutations:
    """Test mutating operations."""

    def test_worktree_add_and_dirty(self, runner, bare_project, display):
        """Test adding a worktree for an existing branch and checking dirtiness."""
        path = bare_project / "worktrees" / "feature" / "active"
        runner.worktree_add(str(path), "feature/active")

        assert (path / "active.txt").exists()
        assert runner.is_worktree_dirty(str(path)) is False
        (path / "scratch.txt").write_text("x")
        assert runner.is_worktree_dirty(str(path)) is True
        assert any(m.startswith("$ git --git-dir") for m in display.messages)

    def test_worktree_add_new_branch(self, runner, bare_project):
        """Test creating a brand new branch from HEAD."""
        path = bare_project / "worktrees" / "brand-new"
        runner.worktree_add_new(str(path), "brand-new")

        listed = {w.branch for w in runner.worktree_list()}
        assert "brand-new" in listed

    def test_remove_and_delete_branch(self, runner, bare_project):
        """Test removing a worktree and deleting its merged branch."""
        path = bare_project / "worktrees" / "feature" / "done"
        runner.worktree_add(str(path), "feature/done")
        runner.worktree_remove(str(path))
        runner.branch_delete("feature/done")
        runner.worktree_prune()

        assert not path.exists()
        assert "feature/done" not in {w.branch for w in runner.worktree_list()}

    def test_failure_carries_stderr(self, runner):
        """Test a failing command reports command line, status and stderr."""
        with pytest.raises(GitCommandFailed) as exc_info:
            runner.branch_delete("no-such-branch")
        error = exc_info.value
        assert error.status != 0
        assert "branch -d no-such-branch" in error.command
        assert "no-such-branch" in error.stderr
        assert "no-such-branch" in str(error)

    def test_dry_run_renders_only(self, bare_project, display):
        """Test preview mode renders mutating commands without running them."""
        runner = GitRunner(str(bare_project / ".bare"), display, dry_run=True)
        path = bare_project / "worktrees" / "main"
        runner.worktree_add(str(path), "main")

        assert not path.exists()
        assert any(m.startswith("[dry-run] git --git-dir") and "worktree add" in m for m in display.messages)

    def test_git_not_found(self, runner):
        """Test a missing git executable becomes GitNotFoundError."""
        with patch.object(runner._git, "execute", side_effect=GitCommandNotFound("git", "not found")):
            with pytest.raises(GitNotFoundError):
                runner.worktree_list()


class TestBehindCount:
    """Test upstream comparison."""

    def test_no_upstream(self, runner, bare_project):
        """Test a branch without upstream is reported as such."""
        path = bare_project / "worktrees" / "local-only"
        runner.worktree_add_new(str(path), "local-only")

        behind = runner.get_behind_count(str(path))
        assert behind.state is UpstreamState.NO_UPSTREAM

    def test_up_to_date(self, runner, main_worktree):
        """Test a fresh tracking branch is zero behind."""
        behind = runner.get_behind_count(str(main_worktree))
        assert behind.state is UpstreamState.TRACKING
        assert behind.count == 0

    def test_behind_after_fetch_and_pull(self, runner, main_worktree, origin_repo):
        """Test new upstream commits are counted and pulled."""
        readme = f"{origin_repo.working_dir}/README.md"
        with open(readme, "a") as f:
            f.write("more\n")
        origin_repo.index.add(["README.md"])
        origin_repo.index.commit("Upstream change")

        runner.fetch_all()
        assert runner.get_behind_count(str(main_worktree)).count == 1

        runner.pull(str(main_worktree))
        assert runner.get_behind_count(str(main_worktree)).count == 0
        assert "more" in (main_worktree / "README.md").read_text()

    def test_last_commit_age(self, runner, main_worktree):
        """Test the relative age string."""
        assert "ago" in runner.get_last_commit_age(str(main_worktree))
