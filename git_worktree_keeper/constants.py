"""Shared constants for git-worktree-keeper."""

from dataclasses import dataclass
from typing import Dict, List

# Project layout
CONFIG_FILE_NAME = ".worktree.yml"
DEFAULT_GIT_DIR = ".bare"
WORKTREES_DIR = "worktrees"
SHARED_DIR = "shared"
SHARED_COPY_DIR = "copy"
SHARED_SYMLINK_DIR = "symlink"

# Git
DEFAULT_REMOTE = "origin"
HEADS_PREFIX = "refs/heads/"
REMOTE_HEAD_REF = "refs/remotes/origin/HEAD"
REMOTE_FETCH_REFSPEC = "+refs/heads/*:refs/remotes/origin/*"
HEAD_POINTER_MARKER = "->"
SHORT_HEAD_LENGTH = 7

# Templates
TEMPLATE_SUFFIX = ".template"
BINARY_SNIFF_BYTES = 512

PLACEHOLDER_WORKTREE_NAME = "${WORKTREE_NAME}"
PLACEHOLDER_WORKTREE_PATH = "${WORKTREE_PATH}"
PLACEHOLDER_BRANCH_NAME = "${BRANCH_NAME}"
PLACEHOLDER_DATABASE_NAME = "${DATABASE_NAME}"

PLACEHOLDERS: List[str] = [
    PLACEHOLDER_WORKTREE_NAME,
    PLACEHOLDER_WORKTREE_PATH,
    PLACEHOLDER_BRANCH_NAME,
    PLACEHOLDER_DATABASE_NAME,
]


@dataclass
class EditorDefinition:
    """An editor that can be auto-detected on PATH."""

    name: str
    binary: str


KNOWN_EDITORS: List[EditorDefinition] = [
    EditorDefinition("Cursor", "cursor"),
    EditorDefinition("VS Code", "code"),
    EditorDefinition("Zed", "zed"),
]


# Symbol constants
SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "⚠"
SYMBOL_STEP = "→"
DRY_RUN_PREFIX = "[dry-run]"


# Output colors (Rich color names)
OUTPUT_COLORS: Dict[str, str] = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "blue",
    "muted": "bright_black",
}


# Wrapper functions printed by `wt shell-init`
SHELL_WRAPPERS: Dict[str, str] = {
    "bash": """wt() {
  if [ "$1" = "cd" ]; then
    shift
    local dir
    dir="$(command wt cd "$@")"
    if [ -n "$dir" ]; then
      cd "$dir" || return
    fi
  else
    command wt "$@"
  fi
}
""",
    "zsh": """unalias wt 2>/dev/null
eval 'wt() {
  if [ "$1" = "cd" ]; then
    shift
    local dir
    dir="$(command wt cd "$@")"
    if [ -n "$dir" ]; then
      cd "$dir" || return
    fi
  else
    command wt "$@"
  fi
}'
""",
    "fish": """function wt
  if test "$argv[1]" = "cd"
    set -l dir (command wt cd $argv[2..])
    if test -n "$dir"
      cd "$dir"
    end
  else
    command wt $argv
  end
end
""",
}
