"""Custom exceptions for git-worktree-keeper"""

from typing import List, Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class GitOperationError(WorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitCommandFailed(GitOperationError):
    """A git subprocess exited non-zero.

    Carries the full command line, the exit status and the captured stderr
    verbatim, since stderr is usually the only useful diagnostic.
    """

    def __init__(self, command: str, status: Optional[int], stderr: str = ""):
        self.command = command
        self.status = status
        self.stderr = stderr

        detail = stderr.strip()
        message = f"exit {status if status is not None else 'unknown'}"
        if detail:
            message += f"\n{detail}"

        super().__init__(command, message=message)


class GitNotFoundError(GitOperationError):
    """Exception raised when the git executable cannot be started."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("spawn", message=message or "git executable not found on PATH")


class DefaultBranchNotFoundError(GitOperationError):
    """Exception raised when no default branch can be determined."""

    def __init__(self):
        super().__init__("default_branch", message="could not determine default branch")


class WorktreeExistsError(WorktreeKeeperError):
    """A filesystem entry already occupies the worktree path."""

    def __init__(self, relative_path: str):
        self.relative_path = relative_path
        super().__init__(f"worktree already exists: {relative_path}")


class WorktreeNotFoundError(WorktreeKeeperError):
    """No worktree matches the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"worktree not found: {name}")


class NoWorktreesError(WorktreeKeeperError):
    """The project has no (non-bare) worktrees."""

    def __init__(self):
        super().__init__("no worktrees found")


class DirtyWorktreeError(WorktreeKeeperError):
    """The worktree has uncommitted changes."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"worktree {name} has uncommitted changes (use --force to override)"
        )


class ProjectExistsError(WorktreeKeeperError):
    """Target project directory or config already exists."""
    pass


class EditorNotFoundError(WorktreeKeeperError):
    """No usable editor could be resolved."""
    pass


class ConfigNotFoundError(WorktreeKeeperError):
    """Exception raised when no .worktree.yml can be found."""

    def __init__(self, start_dir: Optional[str] = None):
        self.start_dir = start_dir
        msg = "Not a wt project (no .worktree.yml found)"
        if start_dir:
            msg += f" in {start_dir} or any parent directory"
        super().__init__(msg)


class InvalidConfigError(WorktreeKeeperError):
    """Exception raised when .worktree.yml cannot be parsed or validated."""

    def __init__(self, message: str):
        super().__init__(f"invalid config: {message}")


class HookError(WorktreeKeeperError):
    """One or more hook commands failed."""

    def __init__(self, failed_commands: List[str]):
        self.failed_commands = list(failed_commands)
        super().__init__(f"{len(self.failed_commands)} hook(s) failed")


class UserAbortError(WorktreeKeeperError):
    """The user cancelled an interactive prompt."""

    def __init__(self):
        super().__init__("cancelled by user")


class SharedPathConflictError(WorktreeKeeperError):
    """A non-empty directory in the worktree blocks a shared symlink."""

    def __init__(self, relative_path: str):
        self.relative_path = relative_path
        super().__init__(
            f"cannot link shared entry: {relative_path} is a non-empty directory (move it aside first)"
        )
