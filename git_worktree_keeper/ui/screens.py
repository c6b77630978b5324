"""Textual picker used for interactive selection."""

from typing import List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, OptionList, Static


class PickerApp(App[Optional[str]]):
    """Single-choice list picker.

    Returns the chosen value from `run()`, or None when the user backs out.
    """

    DEFAULT_CSS = """
    PickerApp {
        background: $surface;
    }

    #picker {
        height: auto;
        max-height: 20;
        padding: 0 1;
    }

    #picker-title {
        text-style: bold;
        padding: 0 0 1 0;
    }

    OptionList {
        height: auto;
        max-height: 15;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("q", "cancel", "Cancel", show=False),
    ]

    def __init__(self, title: str, choices: List[str]):
        super().__init__()
        self.picker_title = title
        self.choices = list(choices)

    def compose(self) -> ComposeResult:
        with Vertical(id="picker"):
            yield Static(self.picker_title, id="picker-title")
            yield OptionList(*self.choices, id="choices")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Handle enter on an option."""
        self.exit(self.choices[event.option_index])

    def action_cancel(self) -> None:
        self.exit(None)
