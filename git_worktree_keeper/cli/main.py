"""Command-line interface for git-worktree-keeper"""

import os
import sys

from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.config import Config, ProjectConfig
from git_worktree_keeper.constants import SHELL_WRAPPERS
from git_worktree_keeper.core import WorktreeKeeper, annotate_config, clone_project, init_project
from git_worktree_keeper.exceptions import ConfigNotFoundError, UserAbortError, WorktreeKeeperError
from git_worktree_keeper.logging_config import get_log_file, get_logger, setup_logging
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.project_service import find_root, git_dir_path
from git_worktree_keeper.ui.prompts import InteractivePrompter, Prompter

logger = get_logger(__name__)


def load_keeper(config: Config, display: DisplayService, prompter: Prompter, cwd=None) -> WorktreeKeeper:
    """Find the enclosing project and build a WorktreeKeeper for it."""
    project_root = find_root(cwd or os.getcwd())
    project_config = ProjectConfig.load(project_root)
    git = GitRunner(
        str(git_dir_path(project_root, project_config)),
        display,
        dry_run=config.dry_run,
        timeout=config.git_timeout,
    )
    return WorktreeKeeper(project_root, project_config, git, display, prompter, config=config)


def run_command(args, config: Config, display: DisplayService, prompter: Prompter) -> int:
    """Dispatch a parsed command. Returns the process exit code."""
    command = args.command

    if command == "shell-init":
        sys.stdout.write(SHELL_WRAPPERS[args.shell])
        return 0

    if command == "clone":
        clone_project(args.url, args.name, display, prompter, config=config)
        return 0

    if command == "init":
        init_project(os.getcwd(), display, force=args.force, dry_run=config.dry_run)
        return 0

    if command == "config":
        annotate_config(find_root(os.getcwd()), display, update=args.update, dry_run=config.dry_run)
        return 0

    keeper = load_keeper(config, display, prompter)

    if command == "add":
        keeper.add(args.branch)
    elif command == "list":
        keeper.list()
    elif command == "status":
        keeper.status()
    elif command == "remove":
        keeper.remove(args.name, force=args.force)
    elif command == "prune":
        keeper.prune(force=args.force)
    elif command == "sync":
        result = keeper.sync(rebase=args.rebase)
        if not result.ok:
            display.error(f"{result.failed} worktree(s) failed to sync")
            return 1
    elif command == "apply":
        keeper.apply(args.name, all_worktrees=args.all_worktrees)
    elif command == "cd":
        if sys.stdout.isatty():
            # Without the wrapper the path is only printed
            display.info("Tip: wt cd prints a path but can't change your directory directly.")
            display.info('  Run: eval "$(wt shell-init zsh)"  (or bash|fish) to set up the wrapper.')
        print(keeper.cd_path(args.name))
    elif command == "open":
        keeper.open(args.name)

    return 0


def main(argv=None) -> int:
    """Main entry point for the application."""
    display = DisplayService()
    debug = False
    try:
        parsed_args = parse_args(argv)
        debug = parsed_args.debug

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            dry_run=parsed_args.dry_run,
            interactive=sys.stdin.isatty(),
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            git_timeout=parsed_args.timeout,
            hook_timeout=parsed_args.hook_timeout,
        )

        if parsed_args.debug:
            display.console.print("[yellow]Debug mode enabled[/yellow]")
            display.console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                display.console.print(f"  {key}: {value}")
            display.console.print(f"[dim]Log file: {get_log_file()}[/dim]")

        return run_command(parsed_args, config, display, InteractivePrompter(display.console))
    except UserAbortError:
        logger.debug("Prompt cancelled")
        return 0
    except ConfigNotFoundError as e:
        display.error(str(e))
        display.info("  Run 'wt clone <repo-url>' to create one.")
        return 1
    except WorktreeKeeperError as e:
        display.error(str(e))
        if debug:
            display.console.print_exception()
        return 1
    except KeyboardInterrupt:
        display.console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        display.console.print(f"[red]Error: {e}[/red]")
        if debug:
            display.console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
