"""Interactive user interface pieces."""

from .prompts import InteractivePrompter, Prompter

__all__ = ["InteractivePrompter", "Prompter"]
