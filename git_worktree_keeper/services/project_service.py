"""Project discovery, scaffolding and editor resolution"""
import os
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional, Union

from git_worktree_keeper.config import ProjectConfig
from git_worktree_keeper.constants import (
    KNOWN_EDITORS,
    SHARED_COPY_DIR,
    SHARED_DIR,
    SHARED_SYMLINK_DIR,
    WORKTREES_DIR,
)
from git_worktree_keeper.exceptions import ConfigNotFoundError, EditorNotFoundError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.display_service import DisplayService

if TYPE_CHECKING:
    from git_worktree_keeper.ui.prompts import Prompter

logger = get_logger(__name__)

PathLike = Union[str, Path]

# Matches both git@host:org/repo.git and https://host/org/repo(.git)
_REPO_URL_PATTERN = re.compile(r"[^/]+[:/]([^/]+/[^/]+?)(?:\.git)?$")


def find_root(start_dir: PathLike) -> Path:
    """Walk up from `start_dir` to the directory holding .worktree.yml.

    Raises:
        ConfigNotFoundError: If no ancestor has a config file
    """
    start = Path(start_dir).resolve()
    for directory in [start, *start.parents]:
        if ProjectConfig.exists(directory):
            logger.debug(f"Project root: {directory}")
            return directory
    raise ConfigNotFoundError(str(start))


def scaffold_dirs(project_root: PathLike) -> List[Path]:
    root = Path(project_root)
    return [
        root / SHARED_DIR / SHARED_COPY_DIR,
        root / SHARED_DIR / SHARED_SYMLINK_DIR,
        root / WORKTREES_DIR,
    ]


def create_scaffold(project_root: PathLike, display: DisplayService, dry_run: bool = False) -> None:
    """Create shared/copy, shared/symlink and worktrees under the project root."""
    for directory in scaffold_dirs(project_root):
        if dry_run:
            display.dry_run(f"mkdir -p {directory}")
            continue
        directory.mkdir(parents=True, exist_ok=True)


def repo_name_from_url(url: str) -> str:
    """Derive a project directory name from a clone URL.

    >>> repo_name_from_url("git@github.com:org/repo.git")
    'repo'
    >>> repo_name_from_url("https://github.com/org/repo")
    'repo'
    """
    match = _REPO_URL_PATTERN.search(url)
    if match:
        return match.group(1).split("/")[-1]

    base = os.path.basename(url.rstrip("/"))
    if base.endswith(".git"):
        base = base[: -len(".git")]
    return base


def git_dir_path(project_root: PathLike, cfg: ProjectConfig) -> Path:
    return Path(project_root) / cfg.git_dir


def worktree_path_for(project_root: PathLike, branch: str) -> Path:
    """Worktrees mirror the branch name, slashes included."""
    return Path(project_root) / WORKTREES_DIR / branch


def resolve_editor(
    cfg: ProjectConfig,
    prompter: "Prompter",
    which: Optional[Callable[[str], Optional[str]]] = None,
    environ: Optional[dict] = None,
) -> str:
    """Pick the editor binary for `wt open`.

    Order: configured editor, then $EDITOR, then the known editors found on
    PATH (asking the user when more than one is installed).

    Raises:
        EditorNotFoundError: If a configured editor is missing or none is found
    """
    which = which or shutil.which
    env = os.environ if environ is None else environ

    if cfg.editor:
        if which(cfg.editor) is None:
            raise EditorNotFoundError(f"configured editor not found: {cfg.editor}")
        return cfg.editor

    env_editor = env.get("EDITOR", "").strip()
    if env_editor:
        if which(env_editor) is None:
            raise EditorNotFoundError(f"$EDITOR not found: {env_editor}")
        return env_editor

    available = [editor.binary for editor in KNOWN_EDITORS if which(editor.binary) is not None]
    if not available:
        raise EditorNotFoundError("no editor found: set 'editor' in .worktree.yml or $EDITOR")
    if len(available) == 1:
        return available[0]
    return prompter.select_editor(available)
