"""Worktree lifecycle for a bare-repository project"""

import os
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from git_worktree_keeper.config import Config, ProjectConfig
from git_worktree_keeper.exceptions import (
    DirtyWorktreeError,
    GitOperationError,
    HookError,
    NoWorktreesError,
    SharedPathConflictError,
    UserAbortError,
    WorktreeExistsError,
    WorktreeKeeperError,
    WorktreeNotFoundError,
)
from git_worktree_keeper.formatters import format_relative_path
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import PruneResult, SyncResult, WorktreeInfo
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git.backend import GitBackend
from git_worktree_keeper.services.hook_service import HookService
from git_worktree_keeper.services.project_service import resolve_editor, worktree_path_for
from git_worktree_keeper.services.template_service import TemplateService
from git_worktree_keeper.ui.prompts import Prompter

logger = get_logger(__name__)

BRANCH_PLACEHOLDER = "feature/my-branch"


def _label(wt: WorktreeInfo) -> str:
    """Name used for a worktree in messages."""
    return wt.branch or os.path.basename(wt.path)


def _contains(parent: str, child: str) -> bool:
    """True when `child` is `parent` or lies below it, after resolving symlinks."""
    parent = os.path.realpath(parent)
    child = os.path.realpath(child)
    return child == parent or child.startswith(parent.rstrip(os.sep) + os.sep)


class WorktreeKeeper:
    """Creates, removes, prunes and syncs the worktrees of one project."""

    def __init__(
        self,
        project_root: Union[str, Path],
        project_config: ProjectConfig,
        git: GitBackend,
        display: DisplayService,
        prompter: Prompter,
        hooks: Optional[HookService] = None,
        templates: Optional[TemplateService] = None,
        config: Optional[Config] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            project_root: Directory holding .worktree.yml
            project_config: Loaded .worktree.yml
            git: Git backend scoped to the project's bare repository
            display: Output sink
            prompter: Source of interactive answers
            hooks: Hook runner (built from config when omitted)
            templates: Shared file engine (built from config when omitted)
            config: Runtime options
        """
        self.project_root = Path(project_root)
        self.project_config = project_config
        self.git = git
        self.display = display
        self.prompter = prompter
        self.config = config if config is not None else Config(dry_run=git.dry_run)
        self.hooks = hooks or HookService(display, dry_run=self.dry_run, timeout=self.config.hook_timeout)
        self.templates = templates or TemplateService(self.project_root, display, dry_run=self.dry_run)

    @property
    def dry_run(self) -> bool:
        return self.git.dry_run

    def _relative(self, path: Union[str, Path]) -> str:
        return format_relative_path(str(path), str(self.project_root))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def list_worktrees(self) -> List[WorktreeInfo]:
        """Non-bare worktrees, in listing order."""
        return [wt for wt in self.git.worktree_list() if not wt.is_bare]

    def _require_worktrees(self) -> List[WorktreeInfo]:
        worktrees = self.list_worktrees()
        if not worktrees:
            raise NoWorktreesError()
        return worktrees

    def find_worktree(self, name: str, worktrees: Optional[List[WorktreeInfo]] = None) -> WorktreeInfo:
        """Find a worktree by branch name.

        Raises:
            WorktreeNotFoundError: If no worktree has that branch
        """
        if worktrees is None:
            worktrees = self.list_worktrees()
        for wt in worktrees:
            if wt.branch == name:
                return wt
        raise WorktreeNotFoundError(name)

    def select_worktree(self, name: Optional[str] = None) -> WorktreeInfo:
        """Resolve a worktree by name, or ask the user to pick one."""
        worktrees = self._require_worktrees()
        if name is None:
            name = self.prompter.select_worktree([_label(wt) for wt in worktrees])
            for wt in worktrees:
                if _label(wt) == name:
                    return wt
        return self.find_worktree(name, worktrees)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def list(self) -> List[WorktreeInfo]:
        worktrees = self.list_worktrees()
        if not worktrees:
            self.display.info("No worktrees found. Use 'wt add' to create one.")
            return worktrees
        self.display.display_worktree_table(worktrees, str(self.project_root))
        return worktrees

    def status(self) -> List[tuple]:
        """Show each worktree with its clean/dirty state and last commit age."""
        worktrees = self.list_worktrees()
        if not worktrees:
            self.display.info("No worktrees found. Use 'wt add' to create one.")
            return []

        rows = []
        for wt in worktrees:
            dirty = self.git.is_worktree_dirty(wt.path)
            age = self.git.get_last_commit_age(wt.path)
            rows.append((wt, dirty, age))

        self.display.display_status_table(rows, str(self.project_root))
        return rows

    def cd_path(self, name: Optional[str] = None) -> str:
        return self.select_worktree(name).path

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _choose_branch(self) -> str:
        branches = self.git.list_remote_branches()
        if branches:
            return self.prompter.select_branch(branches)
        return self.prompter.input_text("Branch name", BRANCH_PLACEHOLDER)

    def add(self, branch: Optional[str] = None) -> Path:
        """Create a worktree for `branch`, then apply shared files and setup hooks.

        A branch that exists on the remote is checked out and set to track
        it; any other name becomes a new branch from HEAD.

        Raises:
            WorktreeExistsError: If something already occupies the target path
            HookError: If a setup hook failed (the worktree is kept)
        """
        if branch is None:
            branch = self._choose_branch()

        path = worktree_path_for(self.project_root, branch)
        if os.path.lexists(path):
            raise WorktreeExistsError(self._relative(path))

        has_remote = self.git.has_remote_branch(branch)

        self.display.step(f"Adding worktree for branch: {branch}")
        if has_remote:
            self.git.worktree_add(str(path), branch)
            try:
                self.git.set_upstream(branch)
            except GitOperationError as e:
                self.display.warning(f"Could not set upstream for {branch}: {e}")
        else:
            logger.info(f"{branch} not on remote, creating it from HEAD")
            self.git.worktree_add_new(str(path), branch)

        self.templates.apply(path, branch)

        failed = []
        if self.project_config.setup:
            failed = self.hooks.run(self.project_config.setup, str(path))

        if failed:
            self.display.warning(f"Setup hooks failed, worktree kept at {self._relative(path)}")
            raise HookError(failed)

        self.display.success(f"Worktree created: {self._relative(path)}")
        return path

    def remove(self, name: Optional[str] = None, force: bool = False) -> WorktreeInfo:
        """Remove a worktree and delete its branch.

        Raises:
            DirtyWorktreeError: If the worktree has changes and force is off
        """
        wt = self.select_worktree(name)

        if not force and self.git.is_worktree_dirty(wt.path):
            raise DirtyWorktreeError(_label(wt))

        if self.project_config.teardown:
            failed = self.hooks.run(self.project_config.teardown, wt.path)
            if failed:
                self.display.warning(f"Teardown hooks failed: {HookError(failed)}")

        self.display.step(f"Removing worktree: {_label(wt)}")
        self.git.worktree_remove(wt.path, force=force)

        if wt.branch:
            try:
                self.git.branch_delete(wt.branch)
            except GitOperationError as e:
                self.display.warning(f"Could not delete branch: {e}")

        self.display.success(f"Removed worktree: {_label(wt)}")
        return wt

    def prune_candidates(self, default_branch: str, cwd: str) -> List[WorktreeInfo]:
        """Worktrees whose branch is fully merged into the default branch.

        The default branch, detached worktrees and the worktree holding `cwd`
        are never candidates. A failed merge check skips that worktree.
        """
        candidates = []
        for wt in self.list_worktrees():
            if wt.branch == default_branch or wt.is_detached:
                continue
            if _contains(wt.path, cwd):
                logger.debug(f"Skipping {wt.branch}: current directory is inside it")
                continue

            try:
                merged = self.git.is_branch_merged(wt.branch, default_branch)
            except GitOperationError as e:
                self.display.warning(f"{wt.branch}: could not check merge status: {e}")
                continue

            if merged:
                candidates.append(wt)
        return candidates

    def prune(self, force: bool = False, cwd: Optional[str] = None) -> PruneResult:
        """Remove every worktree whose branch is merged into the default branch."""
        default_branch = self.git.get_default_branch()
        logger.info(f"Default branch: {default_branch}")

        result = PruneResult()
        result.candidates = self.prune_candidates(default_branch, cwd or os.getcwd())

        if not result.candidates:
            self.display.info("No merged worktrees to prune.")
            return result

        self.display.step("Merged worktrees:")
        for wt in result.candidates:
            self.display.info(f"  {wt.branch}  {self._relative(wt.path)}")

        if not force and not self.dry_run:
            try:
                confirmed = self.prompter.confirm(f"Remove {len(result.candidates)} merged worktree(s)?")
            except UserAbortError:
                confirmed = False
            if not confirmed:
                self.display.info("Cancelled.")
                result.cancelled = True
                return result

        for wt in result.candidates:
            self.display.step(f"Removing worktree: {wt.branch}")
            try:
                self.git.worktree_remove(wt.path)
            except GitOperationError as e:
                self.display.warning(f"Could not remove worktree {wt.branch}: {e}")
                continue

            try:
                self.git.branch_delete(wt.branch)
            except GitOperationError as e:
                self.display.warning(f"Could not delete branch: {e}")

            result.removed.append(wt)

        try:
            self.git.worktree_prune()
        except GitOperationError as e:
            self.display.warning(f"Could not prune worktree metadata: {e}")

        self.display.success(f"Pruned {result.removed_count} worktree(s)")
        return result

    def sync(self, rebase: bool = False) -> SyncResult:
        """Fetch once, then pull every clean worktree that is behind its upstream.

        Every worktree is attempted; failures are counted, not raised.
        """
        result = SyncResult()

        self.display.step("Fetching all remotes")
        self.git.fetch_all()

        worktrees = self.list_worktrees()
        if not worktrees:
            self.display.info("No worktrees found.")
            return result

        for wt in worktrees:
            name = _label(wt)

            try:
                behind = self.git.get_behind_count(wt.path)
            except GitOperationError as e:
                self.display.warning(f"{name}: could not check upstream: {e}")
                result.failed += 1
                continue

            if not behind.has_upstream:
                self.display.info(f"{name}: no upstream, skipping")
                continue

            if behind.count == 0:
                self.display.info(f"{name}: up to date")
                result.up_to_date.append(name)
                continue

            try:
                dirty = self.git.is_worktree_dirty(wt.path)
            except GitOperationError as e:
                self.display.warning(f"{name}: could not check status: {e}")
                result.failed += 1
                continue

            if dirty:
                self.display.warning(f"{name}: skipping (dirty worktree)")
                result.skipped += 1
                continue

            self.display.step(f"{name}: pulling {behind.count} commit(s)")
            try:
                if rebase:
                    self.git.pull_rebase(wt.path)
                else:
                    self.git.pull(wt.path)
            except GitOperationError as e:
                self.display.error(f"{name}: pull failed: {e}")
                result.failed += 1
                continue

            result.updated += 1

        self.display.success(
            f"Sync complete: {result.updated} updated, {result.skipped} skipped, {result.failed} failed"
        )
        return result

    def apply(self, name: Optional[str] = None, all_worktrees: bool = False) -> List[WorktreeInfo]:
        """Copy shared files into one worktree, or into all of them."""
        if all_worktrees:
            applied = []
            for wt in self._require_worktrees():
                self.display.step(f"Applying to: {_label(wt)}")
                try:
                    self.templates.apply(wt.path, wt.branch)
                except SharedPathConflictError as e:
                    self.display.warning(f"{_label(wt)}: {e}")
                    continue
                applied.append(wt)
            self.display.success(f"Applied shared files to {len(applied)} worktree(s)")
            return applied

        wt = self.select_worktree(name)
        self.templates.apply(wt.path, wt.branch)
        self.display.success(f"Applied shared files to: {_label(wt)}")
        return [wt]

    def open(self, name: Optional[str] = None) -> None:
        """Open a worktree in the resolved editor."""
        wt = self.select_worktree(name)
        editor = resolve_editor(self.project_config, self.prompter)

        if self.dry_run:
            self.display.dry_run(f"{editor} {wt.path}")
            return

        self.display.step(f"Opening {_label(wt)} in {editor}")
        completed = subprocess.run([editor, wt.path])
        if completed.returncode != 0:
            raise WorktreeKeeperError(f"{editor} exited with status {completed.returncode}")
