"""Interactive prompts: selection, confirmation and text input."""

from typing import List, Optional, Protocol

from rich.console import Console

from git_worktree_keeper.exceptions import UserAbortError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.ui.screens import PickerApp

logger = get_logger(__name__)


class Prompter(Protocol):
    """Questions the lifecycle may ask the user.

    Every method raises UserAbortError when the user cancels.
    """

    def select_branch(self, branches: List[str]) -> str: ...

    def select_worktree(self, names: List[str]) -> str: ...

    def select_editor(self, editors: List[str]) -> str: ...

    def confirm(self, title: str) -> bool: ...

    def input_text(self, title: str, placeholder: str = "") -> str: ...


class InteractivePrompter:
    """Prompter backed by a textual picker and rich console input."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console(stderr=True)

    def _pick(self, title: str, choices: List[str]) -> str:
        if not choices:
            raise UserAbortError()
        result = PickerApp(title, choices).run()
        if result is None:
            raise UserAbortError()
        logger.debug(f"Picked '{result}' from {len(choices)} choices")
        return result

    def select_branch(self, branches: List[str]) -> str:
        return self._pick("Select a branch", branches)

    def select_worktree(self, names: List[str]) -> str:
        return self._pick("Select a worktree", names)

    def select_editor(self, editors: List[str]) -> str:
        return self._pick("Select an editor", editors)

    def _ask(self, prompt: str) -> str:
        try:
            return self.console.input(prompt)
        except EOFError:
            raise UserAbortError()

    def confirm(self, title: str) -> bool:
        response = self._ask(f"\n{title} [y/N] ")
        return response.strip().lower() in ("y", "yes")

    def input_text(self, title: str, placeholder: str = "") -> str:
        prompt = f"{title} [dim]({placeholder})[/dim]: " if placeholder else f"{title}: "
        value = self._ask(prompt).strip()
        if not value:
            raise UserAbortError()
        return value
