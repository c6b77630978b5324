"""Project creation: clone a remote into a bare layout, or initialize in place"""

import os
import shutil
from pathlib import Path
from typing import Optional, Union

from git_worktree_keeper.config import Config, ProjectConfig, write_annotated
from git_worktree_keeper.constants import CONFIG_FILE_NAME, DEFAULT_GIT_DIR, DEFAULT_REMOTE
from git_worktree_keeper.exceptions import GitOperationError, ProjectExistsError, UserAbortError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git.backend import GitBackend
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.project_service import create_scaffold, repo_name_from_url
from git_worktree_keeper.ui.prompts import Prompter

logger = get_logger(__name__)


def _write_config(project_root: Path, display: DisplayService, dry_run: bool) -> None:
    display.step(f"Writing {CONFIG_FILE_NAME}")
    if dry_run:
        display.dry_run(f"write {ProjectConfig.path_for(project_root)}")
        return
    ProjectConfig().save(project_root)


def clone_project(
    url: str,
    name: Optional[str],
    display: DisplayService,
    prompter: Prompter,
    config: Optional[Config] = None,
    cwd: Optional[Union[str, Path]] = None,
    git: Optional[GitBackend] = None,
) -> Path:
    """Clone `url` into a new project directory with a bare repository.

    Args:
        url: Remote URL (SSH or HTTPS)
        name: Project directory name; derived from the URL when omitted
        display: Output sink
        prompter: Asked whether to create an initial worktree
        config: Runtime options
        cwd: Directory the project is created in
        git: Backend to use instead of a GitRunner on the new bare repository

    Returns:
        The project root

    Raises:
        ProjectExistsError: If the target directory already exists
    """
    config = config or Config()
    dry_run = config.dry_run
    name = name or repo_name_from_url(url)
    project_root = (Path(cwd or os.getcwd()) / name).absolute()

    if project_root.exists():
        raise ProjectExistsError(f"directory already exists: {project_root}")

    display.step(f"Creating project directory: {name}")
    if dry_run:
        display.dry_run(f"mkdir -p {project_root}")
    else:
        project_root.mkdir(parents=True)

    bare_dir = project_root / DEFAULT_GIT_DIR
    if git is None:
        git = GitRunner(str(bare_dir), display, dry_run=dry_run, timeout=config.git_timeout)

    display.step("Cloning bare repository")
    git.clone_bare(url, str(bare_dir))

    display.step("Configuring remote fetch refspec")
    git.configure_remote_fetch()

    display.step("Fetching remote branches")
    git.fetch(DEFAULT_REMOTE)

    display.step("Creating project scaffold")
    create_scaffold(project_root, display, dry_run=dry_run)

    project_config = ProjectConfig()
    _write_config(project_root, display, dry_run)

    display.success(f"Project created: {name}")

    _offer_initial_worktree(project_root, project_config, git, display, prompter, config)
    return project_root


def _offer_initial_worktree(
    project_root: Path,
    project_config: ProjectConfig,
    git: GitBackend,
    display: DisplayService,
    prompter: Prompter,
    config: Config,
) -> None:
    try:
        branches = git.list_remote_branches()
    except GitOperationError as e:
        display.warning(f"Could not list remote branches: {e}")
        return

    if not branches:
        return

    try:
        if not prompter.confirm("Create an initial worktree?"):
            return
        branch = prompter.select_branch(branches)
    except UserAbortError:
        return

    # Imported here to keep bootstrap importable from the core package init
    from git_worktree_keeper.core.worktree_keeper import WorktreeKeeper

    keeper = WorktreeKeeper(project_root, project_config, git, display, prompter, config=config)
    keeper.add(branch)


def init_project(
    directory: Union[str, Path],
    display: DisplayService,
    force: bool = False,
    dry_run: bool = False,
) -> Path:
    """Set up the worktree layout and a default config in an existing directory.

    Raises:
        ProjectExistsError: If .worktree.yml exists and force is off
    """
    root = Path(directory).absolute()

    if ProjectConfig.exists(root) and not force:
        raise ProjectExistsError(f"{CONFIG_FILE_NAME} already exists (use --force to overwrite)")

    if (root / ".git").is_dir():
        display.warning("Found existing .git directory. This project already has a standard git repository.")

    if (root / DEFAULT_GIT_DIR).is_dir():
        display.info(f"Found existing {DEFAULT_GIT_DIR} directory, will use as git dir.")

    display.step("Creating project scaffold")
    create_scaffold(root, display, dry_run=dry_run)

    _write_config(root, display, dry_run)

    display.success("Initialized worktree project")
    return root


def annotate_config(
    project_root: Union[str, Path],
    display: DisplayService,
    update: bool = False,
    dry_run: bool = False,
) -> Path:
    """Write an annotated .worktree.yml.

    An existing file is backed up to .worktree.yml.bak and replaced with a
    fresh template, unless `update` is set, in which case its values are
    carried into the annotated template.
    """
    root = Path(project_root)
    path = ProjectConfig.path_for(root)

    if not path.exists():
        display.step(f"Writing {CONFIG_FILE_NAME}")
        if dry_run:
            display.dry_run(f"write {path}")
        else:
            write_annotated(root)
        display.success(f"Created {CONFIG_FILE_NAME}")
        return path

    if update:
        existing = ProjectConfig.load(root)
        display.step(f"Updating {CONFIG_FILE_NAME} with documentation comments")
        if dry_run:
            display.dry_run(f"write {path}")
        else:
            write_annotated(root, existing)
        display.success(f"Updated {CONFIG_FILE_NAME} with documentation comments")
        return path

    backup = path.with_name(path.name + ".bak")
    display.step(f"Backing up existing config to {backup.name}")
    if dry_run:
        display.dry_run(f"cp {path} {backup}")
    else:
        shutil.copyfile(path, backup)

    display.step(f"Writing fresh {CONFIG_FILE_NAME}")
    if dry_run:
        display.dry_run(f"write {path}")
    else:
        write_annotated(root)
    display.success(f"Backed up existing config to {backup.name}")
    return path
