"""Display service: the single sink for user-facing output."""
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_worktree_keeper.constants import (
    DRY_RUN_PREFIX,
    OUTPUT_COLORS,
    SYMBOL_ERROR,
    SYMBOL_STEP,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
)
from git_worktree_keeper.formatters import format_dirty, format_relative_path, format_short_head
from git_worktree_keeper.models.worktree import WorktreeInfo


class DisplayService:
    """Writes progress, warnings and tables to a rich Console.

    Output goes to stderr by default so that stdout stays clean for commands
    whose result is meant to be captured (wt cd). Tests pass a recording
    console instead.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console(stderr=True)

    def _print(self, style: str, text: str) -> None:
        self.console.print(f"[{OUTPUT_COLORS[style]}]{escape(text)}[/{OUTPUT_COLORS[style]}]")

    def success(self, message: str) -> None:
        self._print("success", f"{SYMBOL_SUCCESS} {message}")

    def error(self, message: str) -> None:
        self._print("error", f"{SYMBOL_ERROR} {message}")

    def warning(self, message: str) -> None:
        self._print("warning", f"{SYMBOL_WARNING} {message}")

    def info(self, message: str) -> None:
        self._print("info", message)

    def step(self, message: str) -> None:
        self._print("info", f"{SYMBOL_STEP} {message}")

    def dry_run(self, action: str) -> None:
        """Describe an action that preview mode did not perform."""
        self._print("muted", f"{DRY_RUN_PREFIX} {action}")

    def command(self, command_line: str) -> None:
        """Echo a command about to be executed."""
        self.console.print(f"[italic {OUTPUT_COLORS['muted']}]  $ {escape(command_line)}[/]")

    def stream(self, line: str) -> None:
        """Pass through raw subprocess output."""
        self.console.print(line, markup=False, highlight=False)

    def display_worktree_table(self, worktrees: List[WorktreeInfo], project_root: str) -> None:
        """Display branch, relative path and short head for each worktree."""
        table = Table(box=None, show_header=False, pad_edge=False)
        table.add_column("Branch")
        table.add_column("Path")
        table.add_column("Head", style=OUTPUT_COLORS["muted"])

        for wt in worktrees:
            table.add_row(
                escape(wt.branch or "(detached)"),
                escape(format_relative_path(wt.path, project_root)),
                format_short_head(wt.head),
            )

        self.console.print(table)

    def display_status_table(
        self,
        rows: List[tuple],
        project_root: str,
    ) -> None:
        """Display worktrees with their clean/dirty state and last commit age.

        Args:
            rows: (WorktreeInfo, dirty, age) tuples
            project_root: Project root for relative paths
        """
        table = Table(box=None, show_header=False, pad_edge=False)
        table.add_column("Branch")
        table.add_column("Path")
        table.add_column("Head", style=OUTPUT_COLORS["muted"])
        table.add_column("State")
        table.add_column("Age", style=OUTPUT_COLORS["muted"])

        for wt, dirty, age in rows:
            table.add_row(
                escape(wt.branch or "(detached)"),
                escape(format_relative_path(wt.path, project_root)),
                format_short_head(wt.head),
                format_dirty(dirty),
                escape(age),
            )

        self.console.print(table)
