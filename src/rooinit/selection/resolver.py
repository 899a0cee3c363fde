"""
Selection Resolver

Turns a SelectionRequest into an ordered, deduplicated list of mode slugs.

Non-interactive requests never fail fast: every invalid mode slug and every
invalid category slug is collected so one error can name all of them.
Order is by first occurrence - explicit mode slugs first, then the modes
pulled in by each category, skipping anything already selected.

Interactive requests loop category -> modes -> "another category?" until
the user stops or cancels; cancellation keeps what was picked so far.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from rooinit.errors import SelectionError
from rooinit.definitions.merger import DefinitionSet
from rooinit.definitions.models import CategoryDefinition, ModeDefinition
from rooinit.selection.prompts import Choice, ConsolePrompter, PromptCancelled

logger = logging.getLogger(__name__)


def split_slugs(value: Optional[str]) -> List[str]:
    """Split a comma-separated flag value into trimmed, non-empty slugs."""
    if not value:
        return []
    return [s.strip() for s in value.split(",") if s.strip()]


@dataclass(frozen=True)
class SelectionRequest:
    """
    What the caller asked for.

    Explicit mode slugs and category slugs may be combined. A request with
    neither is interactive.
    """
    mode_slugs: Sequence[str] = ()
    category_slugs: Sequence[str] = ()

    @property
    def interactive(self) -> bool:
        return not self.mode_slugs and not self.category_slugs

    @classmethod
    def from_flags(cls, modes: Optional[str] = None, category: Optional[str] = None) -> "SelectionRequest":
        return cls(tuple(split_slugs(modes)), tuple(split_slugs(category)))


@dataclass
class SelectionResult:
    mode_slugs: List[str] = field(default_factory=list)
    invalid_mode_slugs: List[str] = field(default_factory=list)
    invalid_category_slugs: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.invalid_mode_slugs or self.invalid_category_slugs)

    @property
    def is_empty(self) -> bool:
        return not self.mode_slugs

    def add(self, slugs: Iterable[str]) -> None:
        for slug in slugs:
            if slug not in self.mode_slugs:
                self.mode_slugs.append(slug)


class SelectionResolver:
    """
    Resolves selection requests against a merged DefinitionSet.

    Args:
        definitions: The validated, merged definitions
        prompter: Used for interactive selection (defaults to ConsolePrompter)
    """

    def __init__(self, definitions: DefinitionSet, prompter: Optional[ConsolePrompter] = None):
        self.definitions = definitions
        self.prompter = prompter or ConsolePrompter()

    # =========================================================================
    # Non-interactive
    # =========================================================================

    def resolve(self, request: SelectionRequest) -> SelectionResult:
        """Resolve explicit and category slugs, collecting every invalid one."""
        result = SelectionResult()

        for slug in request.mode_slugs:
            slug = slug.strip()
            if not slug:
                continue
            if self.definitions.has_mode(slug):
                result.add([slug])
            elif slug not in result.invalid_mode_slugs:
                result.invalid_mode_slugs.append(slug)

        for slug in request.category_slugs:
            slug = slug.strip()
            if not slug:
                continue
            if self.definitions.has_category(slug):
                result.add(m.slug for m in self.definitions.modes_in_category(slug))
            elif slug not in result.invalid_category_slugs:
                result.invalid_category_slugs.append(slug)

        return result

    # =========================================================================
    # Interactive
    # =========================================================================

    def _prompt_category(self) -> CategoryDefinition:
        choices = [
            Choice(f"{cat.name} - {cat.description}", cat)
            for cat in self.definitions.categories
        ]
        return self.prompter.select_one("Select a category:", choices)

    def _prompt_modes(self, category: CategoryDefinition) -> List[str]:
        modes = self.definitions.modes_in_category(category.slug)
        if not modes:
            logger.warning(f"No modes available in category: {category.name}")
            return []
        choices = [Choice(f"{m.name} ({m.slug}) - {m.description}", m.slug) for m in modes]
        return self.prompter.select_many(f"Select modes from {category.name}:", choices)

    def resolve_interactively(self) -> SelectionResult:
        """
        Category -> modes loop. Cancellation at any prompt ends the loop and
        returns what was accumulated so far.
        """
        result = SelectionResult()

        if not self.definitions.categories:
            logger.warning("No categories available for selection.")
            return result

        try:
            while True:
                category = self._prompt_category()
                result.add(self._prompt_modes(category))

                # Nothing else to pick from
                if len(self.definitions.categories) <= 1:
                    break
                if not self.prompter.confirm("Do you want to select modes from another category?", default=False):
                    break
        except PromptCancelled:
            logger.info("Selection process cancelled.")

        return result

    # =========================================================================
    # Entry point
    # =========================================================================

    def select(self, request: SelectionRequest) -> SelectionResult:
        """
        Resolve `request`, interactive or not.

        Raises:
            SelectionError: any identifier was invalid. Nothing is applied.
        """
        if request.interactive:
            return self.resolve_interactively()

        result = self.resolve(request)
        if result.has_errors:
            raise SelectionError(result.invalid_mode_slugs, result.invalid_category_slugs)
        return result

    def modes_for(self, result: SelectionResult) -> List[ModeDefinition]:
        modes = {m.slug: m for m in self.definitions.modes}
        return [modes[slug] for slug in result.mode_slugs]
