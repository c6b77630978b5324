"""Command-line argument parsing for git-worktree-keeper."""

import argparse

from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.constants import SHELL_WRAPPERS


def positive_float(value: str) -> float:
    """argparse type for a strictly positive number of seconds."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the `wt` parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="wt",
        description="A smarter git worktree workflow built on a bare repository",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview mode - show what would be done without making changes",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        metavar="SECONDS",
        help="Kill any git command that runs longer than this",
    )
    parser.add_argument(
        "--hook-timeout",
        type=positive_float,
        metavar="SECONDS",
        help="Kill any setup or teardown hook that runs longer than this",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    clone = subparsers.add_parser("clone", help="Clone a repo into a bare worktree project")
    clone.add_argument("url", help="Repository URL")
    clone.add_argument("name", nargs="?", help="Project directory (default: repository name)")

    init = subparsers.add_parser("init", help="Initialize a worktree project in the current directory")
    init.add_argument("--force", action="store_true", help="Overwrite existing configuration")

    add = subparsers.add_parser("add", help="Create a new worktree")
    add.add_argument("branch", nargs="?", help="Branch to check out (picked interactively if omitted)")

    subparsers.add_parser("list", help="List all worktrees")
    subparsers.add_parser("status", help="Show status of all worktrees")

    remove = subparsers.add_parser("remove", help="Remove a worktree and its branch")
    remove.add_argument("name", nargs="?", help="Worktree branch name")
    remove.add_argument(
        "--force", action="store_true", help="Remove even if worktree has uncommitted changes"
    )

    prune = subparsers.add_parser("prune", help="Remove worktrees with fully merged branches")
    prune.add_argument("--force", action="store_true", help="Skip confirmation prompt")

    sync = subparsers.add_parser("sync", help="Fetch and pull all worktrees")
    sync.add_argument(
        "--rebase", action="store_true", help="Use rebase instead of merge when pulling"
    )

    apply = subparsers.add_parser("apply", help="Apply shared files to a worktree")
    apply.add_argument("name", nargs="?", help="Worktree branch name")
    apply.add_argument("--all", action="store_true", dest="all_worktrees", help="Apply to all worktrees")

    cd = subparsers.add_parser(
        "cd",
        help="Print worktree path for shell navigation",
        description='Prints the absolute path of a worktree. Use with: cd "$(wt cd)"',
    )
    cd.add_argument("name", nargs="?", help="Worktree branch name")

    open_cmd = subparsers.add_parser("open", help="Open a worktree in an editor")
    open_cmd.add_argument("name", nargs="?", help="Worktree branch name")

    config = subparsers.add_parser("config", help="Manage project configuration")
    config_sub = config.add_subparsers(dest="config_command", metavar="ACTION")
    config_sub.required = True
    config_init = config_sub.add_parser(
        "init", help="Generate an annotated .worktree.yml with documentation comments"
    )
    config_init.add_argument(
        "--update", action="store_true", help="Merge existing values into the annotated template"
    )

    shell_init = subparsers.add_parser("shell-init", help="Print the shell wrapper for 'wt cd'")
    shell_init.add_argument("shell", choices=sorted(SHELL_WRAPPERS), help="Target shell")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
