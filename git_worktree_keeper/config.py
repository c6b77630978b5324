"""Configuration handling for git-worktree-keeper"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import yaml

from git_worktree_keeper.constants import CONFIG_FILE_NAME, DEFAULT_GIT_DIR
from git_worktree_keeper.exceptions import ConfigNotFoundError, InvalidConfigError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Runtime options for a single invocation, with validation."""

    dry_run: bool = False  # Preview mode: render mutations instead of running them
    interactive: bool = True
    verbose: bool = False
    debug: bool = False
    git_timeout: Optional[float] = None  # Seconds before an in-flight git command is killed
    hook_timeout: Optional[float] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_timeout("git_timeout", self.git_timeout)
        self._validate_timeout("hook_timeout", self.hook_timeout)

    @staticmethod
    def _validate_timeout(name: str, value: Optional[float]):
        """Validate a timeout is positive when set."""
        if value is not None and value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "dry_run": self.dry_run,
            "interactive": self.interactive,
            "verbose": self.verbose,
            "debug": self.debug,
            "git_timeout": self.git_timeout,
            "hook_timeout": self.hook_timeout,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {"dry_run", "interactive", "verbose", "debug", "git_timeout", "hook_timeout"}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


@dataclass
class ProjectConfig:
    """Per-project settings stored in .worktree.yml."""

    version: int = 1
    git_dir: str = DEFAULT_GIT_DIR
    setup: List[str] = field(default_factory=list)  # Run after a worktree is created
    teardown: List[str] = field(default_factory=list)  # Run before a worktree is removed
    editor: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_version()
        self._validate_git_dir()
        self._validate_hooks("setup", self.setup)
        self._validate_hooks("teardown", self.teardown)
        self._validate_editor()

    def _validate_version(self):
        """Validate version is an integer."""
        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise InvalidConfigError(f"version must be an integer, got {self.version!r}")

    def _validate_git_dir(self):
        """Validate git_dir is a non-empty string."""
        if not isinstance(self.git_dir, str) or not self.git_dir.strip():
            raise InvalidConfigError("git_dir cannot be empty")
        self.git_dir = self.git_dir.strip()

    @staticmethod
    def _validate_hooks(name: str, commands):
        """Validate a hook list contains only strings."""
        if not isinstance(commands, list) or not all(isinstance(c, str) for c in commands):
            raise InvalidConfigError(f"{name} must be a list of commands")

    def _validate_editor(self):
        """Validate editor is a string when set."""
        if self.editor is not None and not isinstance(self.editor, str):
            raise InvalidConfigError(f"editor must be a string, got {self.editor!r}")
        if self.editor is not None and not self.editor.strip():
            self.editor = None

    def to_dict(self) -> dict:
        """Convert config to the dictionary written to .worktree.yml."""
        data = {"version": self.version, "git_dir": self.git_dir}
        if self.setup:
            data["setup"] = list(self.setup)
        if self.teardown:
            data["teardown"] = list(self.teardown)
        if self.editor:
            data["editor"] = self.editor
        return data

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ProjectConfig":
        """Create ProjectConfig from dictionary, ignoring unknown keys."""
        known_fields = {"version", "git_dir", "setup", "teardown", "editor"}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        # A bare "setup:" key in YAML loads as None
        for key in ("setup", "teardown"):
            if key in filtered and filtered[key] is None:
                filtered[key] = []
        return cls(**filtered)

    @staticmethod
    def path_for(project_root: Union[str, Path]) -> Path:
        """Path of the config file inside a project."""
        return Path(project_root) / CONFIG_FILE_NAME

    @classmethod
    def exists(cls, project_root: Union[str, Path]) -> bool:
        """Check whether a project directory has a config file."""
        return cls.path_for(project_root).is_file()

    @classmethod
    def load(cls, project_root: Union[str, Path]) -> "ProjectConfig":
        """Load .worktree.yml from a project root.

        Raises:
            ConfigNotFoundError: If the file does not exist
            InvalidConfigError: If the file is not valid YAML or fails validation
        """
        path = cls.path_for(project_root)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigNotFoundError(str(project_root))
        except yaml.YAMLError as e:
            raise InvalidConfigError(str(e))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigError(f"{CONFIG_FILE_NAME} must contain a mapping")

        logger.debug(f"Loaded {path}: {data}")
        return cls.from_dict(data)

    def save(self, project_root: Union[str, Path]) -> Path:
        """Write this config as plain YAML."""
        path = self.path_for(project_root)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        logger.debug(f"Wrote {path}")
        return path


_YAML_SPECIAL = set(":{}[]&*?|>!%#`@,\"'\\$\n")


def yaml_quote(value: str) -> str:
    """Double-quote a scalar when YAML would otherwise misread it."""
    if value == "" or any(ch in _YAML_SPECIAL for ch in value):
        # JSON strings are valid double-quoted YAML scalars
        return json.dumps(value)
    return value


def render_annotated(cfg: Optional[ProjectConfig] = None) -> str:
    """Render .worktree.yml with a comment above every field.

    With no config, defaults are used and optional fields are commented out.
    With a config, its values are rendered uncommented.
    """
    lines = [
        "# wt - worktree project configuration",
        "",
        "# Config schema version (do not change)",
        f"version: {cfg.version if cfg else 1}",
        "",
        "# Path to the bare git repository",
        f"git_dir: {cfg.git_dir if cfg else DEFAULT_GIT_DIR}",
        "",
        "# Editor for 'wt open' (e.g. cursor, code, zed)",
        "# Falls back to $EDITOR, then auto-detects",
    ]
    if cfg and cfg.editor:
        lines.append(f"editor: {yaml_quote(cfg.editor)}")
    else:
        lines.append("# editor: cursor")

    lines += ["", "# Commands to run after creating a new worktree"]
    if cfg and cfg.setup:
        lines.append("setup:")
        lines += [f"  - {yaml_quote(cmd)}" for cmd in cfg.setup]
    else:
        lines += ["# setup:", "#   - npm install", "#   - cp .env.example .env"]

    lines += ["", "# Commands to run before removing a worktree"]
    if cfg and cfg.teardown:
        lines.append("teardown:")
        lines += [f"  - {yaml_quote(cmd)}" for cmd in cfg.teardown]
    else:
        lines += ["# teardown:", "#   - docker compose down"]

    return "\n".join(lines) + "\n"


def write_annotated(project_root: Union[str, Path], cfg: Optional[ProjectConfig] = None) -> Path:
    """Write an annotated .worktree.yml, optionally carrying existing values."""
    path = ProjectConfig.path_for(project_root)
    path.write_text(render_annotated(cfg), encoding="utf-8")
    return path
