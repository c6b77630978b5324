"""Git command runner built on GitPython's command layer"""
import shlex
from typing import List, Optional, Sequence, Tuple

import git
from git.exc import GitCommandNotFound

from git_worktree_keeper.constants import DEFAULT_REMOTE, HEADS_PREFIX, REMOTE_FETCH_REFSPEC, REMOTE_HEAD_REF
from git_worktree_keeper.exceptions import (
    DefaultBranchNotFoundError,
    GitCommandFailed,
    GitNotFoundError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import BehindCount, UpstreamState, WorktreeInfo
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git.parsers import (
    parse_behind_count,
    parse_default_branch,
    parse_dirty_status,
    parse_remote_branches,
    parse_worktree_list,
)

logger = get_logger(__name__)

# Exit status of `merge-base --is-ancestor` when the commit is not an ancestor
NOT_ANCESTOR_STATUS = 1


def format_command(args: Sequence[str]) -> str:
    """Render a git argument vector as a copy-pasteable command line."""
    return " ".join(["git"] + [shlex.quote(str(a)) for a in args])


class GitRunner:
    """Runs git subcommands against one bare repository.

    Commands are split in two paths. Mutations (`run`, `run_in`) are echoed
    before running and only rendered in preview mode. Queries (`query`,
    `query_in`) always execute, since a preview needs real listings to say
    anything useful.
    """

    def __init__(
        self,
        git_dir: str,
        display: DisplayService,
        dry_run: bool = False,
        timeout: Optional[float] = None,
        remote: str = DEFAULT_REMOTE,
    ):
        """Initialize the runner.

        Args:
            git_dir: Absolute path to the bare repository
            display: Output sink for echoed and previewed commands
            dry_run: Render mutating commands instead of running them
            timeout: Seconds before an in-flight git process is killed
            remote: Remote name used for branch listings
        """
        self.git_dir = str(git_dir)
        self.display = display
        self.dry_run = dry_run
        self.timeout = timeout
        self.remote = remote
        self._git = git.Git()

    # ------------------------------------------------------------------
    # Execution primitives
    # ------------------------------------------------------------------

    def _repo_args(self, args: Sequence[str]) -> List[str]:
        return ["--git-dir", self.git_dir, *args]

    @staticmethod
    def _worktree_args(worktree_path: str, args: Sequence[str]) -> List[str]:
        # Scoped to the worktree so its own index and working state are used
        return ["-C", str(worktree_path), *args]

    def _execute(self, args: Sequence[str]) -> Tuple[int, str, str]:
        """Spawn git and return (status, stdout, stderr) without raising on exit codes."""
        command = ["git", *args]
        try:
            status, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                kill_after_timeout=self.timeout,
            )
        except GitCommandNotFound as e:
            raise GitNotFoundError(str(e))

        logger.debug(f"{format_command(args)} -> exit {status}")
        if status != 0 and stderr:
            logger.debug(f"stderr: {stderr.strip()}")
        return status, (stdout or "").rstrip(), stderr or ""

    def _check(self, args: Sequence[str]) -> str:
        status, stdout, stderr = self._execute(args)
        if status != 0:
            raise GitCommandFailed(format_command(args), status, stderr)
        return stdout

    def _mutate(self, args: Sequence[str]) -> str:
        command_line = format_command(args)
        if self.dry_run:
            self.display.dry_run(command_line)
            return ""
        self.display.command(command_line)
        return self._check(args)

    def run(self, *args: str) -> str:
        """Run a mutating command against the bare repository."""
        return self._mutate(self._repo_args(args))

    def run_in(self, worktree_path: str, *args: str) -> str:
        """Run a mutating command inside a worktree."""
        return self._mutate(self._worktree_args(worktree_path, args))

    def query(self, *args: str) -> str:
        """Run a read-only command against the bare repository."""
        return self._check(self._repo_args(args))

    def query_in(self, worktree_path: str, *args: str) -> str:
        """Run a read-only command inside a worktree."""
        return self._check(self._worktree_args(worktree_path, args))

    def _probe(self, args: Sequence[str]) -> int:
        """Exit status of a read-only command."""
        status, _, _ = self._execute(args)
        return status

    # ------------------------------------------------------------------
    # Repository operations
    # ------------------------------------------------------------------

    def clone_bare(self, url: str, dest: str) -> None:
        self._mutate(["clone", "--bare", url, str(dest)])

    def configure_remote_fetch(self) -> None:
        """Make fetches populate remote-tracking refs, which a bare clone skips."""
        self.run("config", f"remote.{self.remote}.fetch", REMOTE_FETCH_REFSPEC)

    def fetch(self, remote: str) -> None:
        self.run("fetch", remote)

    def fetch_all(self) -> None:
        self.run("fetch", "--all")

    def list_remote_branches(self) -> List[str]:
        return parse_remote_branches(self.query("branch", "-r"), self.remote)

    def has_remote_branch(self, branch: str) -> bool:
        return branch in self.list_remote_branches()

    def worktree_add(self, path: str, branch: str) -> None:
        """Check out an existing branch into a new worktree."""
        self.run("worktree", "add", str(path), branch)

    def set_upstream(self, branch: str) -> None:
        """Track the remote branch of the same name.

        A bare clone creates local branches without upstream configuration.
        """
        self.run("branch", f"--set-upstream-to={self.remote}/{branch}", branch)

    def worktree_add_new(self, path: str, branch: str) -> None:
        """Create a new branch from HEAD and check it out into a new worktree."""
        self.run("worktree", "add", "-b", branch, str(path), "HEAD")

    def worktree_remove(self, path: str, force: bool = False) -> None:
        args = ["worktree", "remove", str(path)]
        if force:
            args.append("--force")
        self.run(*args)

    def worktree_list(self) -> List[WorktreeInfo]:
        return parse_worktree_list(self.query("worktree", "list", "--porcelain"))

    def worktree_prune(self) -> None:
        self.run("worktree", "prune")

    def branch_delete(self, branch: str, force: bool = False) -> None:
        self.run("branch", "-D" if force else "-d", branch)

    def is_worktree_dirty(self, worktree_path: str) -> bool:
        return parse_dirty_status(self.query_in(worktree_path, "status", "--porcelain"))

    def is_branch_merged(self, branch: str, target: str) -> bool:
        """Check whether `branch` is an ancestor of `target`.

        Exit 1 is the normal "not merged" answer; any other failure is raised.
        """
        args = self._repo_args(["merge-base", "--is-ancestor", branch, target])
        status, _, stderr = self._execute(args)
        if status == 0:
            return True
        if status == NOT_ANCESTOR_STATUS:
            return False
        raise GitCommandFailed(format_command(args), status, stderr)

    def get_default_branch(self) -> str:
        """Resolve the default branch from origin/HEAD, then main, then master."""
        status, stdout, _ = self._execute(self._repo_args(["symbolic-ref", REMOTE_HEAD_REF]))
        if status == 0 and stdout:
            return parse_default_branch(stdout, self.remote)

        for candidate in ("main", "master"):
            ref = f"{HEADS_PREFIX}{candidate}"
            if self._probe(self._repo_args(["show-ref", "--verify", "--quiet", ref])) == 0:
                logger.debug(f"origin/HEAD not set, using {candidate}")
                return candidate

        raise DefaultBranchNotFoundError()

    def get_last_commit_age(self, worktree_path: str) -> str:
        return self.query_in(worktree_path, "log", "-1", "--format=%cr")

    def get_behind_count(self, worktree_path: str) -> BehindCount:
        """Count commits the worktree's branch is behind its upstream."""
        upstream_status = self._probe(
            self._worktree_args(
                worktree_path,
                ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"],
            )
        )
        if upstream_status != 0:
            return BehindCount(UpstreamState.NO_UPSTREAM)

        output = self.query_in(worktree_path, "rev-list", "--count", "HEAD..@{upstream}")
        return BehindCount(UpstreamState.TRACKING, parse_behind_count(output))

    def pull(self, worktree_path: str) -> None:
        self.run_in(worktree_path, "pull")

    def pull_rebase(self, worktree_path: str) -> None:
        self.run_in(worktree_path, "pull", "--rebase")
