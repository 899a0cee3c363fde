"""
rooinit.selection - Resolving which modes to install
"""

from rooinit.selection.prompts import Choice, ConsolePrompter, PromptCancelled
from rooinit.selection.resolver import (
    SelectionRequest,
    SelectionResolver,
    SelectionResult,
    split_slugs,
)

__all__ = [
    "Choice",
    "ConsolePrompter",
    "PromptCancelled",
    "SelectionRequest",
    "SelectionResolver",
    "SelectionResult",
    "split_slugs",
]
