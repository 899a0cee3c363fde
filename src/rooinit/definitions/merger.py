"""
Definition Merger

Combines the system and user catalogs with OVERRIDE semantics: the user
entry for a slug replaces the system entry completely (never field by
field). Iteration order is a stated contract:

    system entries in catalog order, overrides keeping the position of the
    entry they replace, then user-only entries appended in catalog order.

After merging, two cross-validations run over the whole set. Both are fatal:

1. every category slug referenced by a mode exists among merged categories
2. every rule file exists under the rule root of the catalog it came from
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, TypeVar

from rooinit.errors import CatalogValidationError
from rooinit.definitions.models import (
    Catalog,
    CategoryDefinition,
    ModeDefinition,
    Provenance,
)
from rooinit.definitions.repository import DefinitionRepository

logger = logging.getLogger(__name__)

D = TypeVar("D", ModeDefinition, CategoryDefinition)


@dataclass(frozen=True)
class DefinitionSet:
    """Merged, validated modes and categories. Built once per invocation."""
    modes: Tuple[ModeDefinition, ...]
    categories: Tuple[CategoryDefinition, ...]

    def __post_init__(self):
        object.__setattr__(self, "_modes_by_slug", {m.slug: m for m in self.modes})
        object.__setattr__(self, "_categories_by_slug", {c.slug: c for c in self.categories})

    def get_mode(self, slug: str) -> Optional[ModeDefinition]:
        return self._modes_by_slug.get(slug)

    def get_category(self, slug: str) -> Optional[CategoryDefinition]:
        return self._categories_by_slug.get(slug)

    def has_mode(self, slug: str) -> bool:
        return slug in self._modes_by_slug

    def has_category(self, slug: str) -> bool:
        return slug in self._categories_by_slug

    def modes_in_category(self, category_slug: str) -> List[ModeDefinition]:
        return [m for m in self.modes if m.in_category(category_slug)]

    @property
    def mode_slugs(self) -> List[str]:
        return [m.slug for m in self.modes]

    @property
    def category_slugs(self) -> List[str]:
        return [c.slug for c in self.categories]

    def __iter__(self) -> Iterator[ModeDefinition]:
        return iter(self.modes)


def overlay(system_entries: Sequence[D], user_entries: Sequence[D]) -> List[D]:
    """
    Merge one entity type. Returns entries tagged with their provenance.

    Args:
        system_entries: Entries from the system catalog, in catalog order
        user_entries: Entries from the user catalog, in catalog order
    """
    merged: "OrderedDict[str, D]" = OrderedDict()

    for entry in system_entries:
        merged[entry.slug] = entry.with_provenance(Provenance.SYSTEM)

    for entry in user_entries:
        if entry.slug in merged:
            logger.debug(f"User definition overrides system definition: {entry.slug}")
            merged[entry.slug] = entry.with_provenance(Provenance.CUSTOM_OVERRIDE)
        else:
            merged[entry.slug] = entry.with_provenance(Provenance.CUSTOM)

    return list(merged.values())


class DefinitionMerger:
    """Merges catalogs and validates the result against the repository."""

    def __init__(self, repository: DefinitionRepository):
        self.repository = repository

    def merge(self, system: Catalog, user: Catalog) -> DefinitionSet:
        """
        Merge the two catalogs and cross-validate the result.

        Raises:
            CatalogValidationError: dangling category slug or missing rule file.
        """
        definitions = DefinitionSet(
            modes=tuple(overlay(system.modes, user.modes)),
            categories=tuple(overlay(system.categories, user.categories)),
        )
        self.validate_mode_categories(definitions)
        self.validate_rule_paths(definitions)
        return definitions

    def validate_mode_categories(self, definitions: DefinitionSet) -> None:
        for mode in definitions.modes:
            for slug in mode.category_slugs:
                if not definitions.has_category(slug):
                    raise CatalogValidationError(
                        f"Mode \"{mode.slug}\" references non-existent category slug \"{slug}\"."
                    )

    def validate_rule_paths(self, definitions: DefinitionSet) -> None:
        for mode in definitions.modes:
            for rule in mode.rules:
                try:
                    full_path = self.repository.rule_source(rule)
                except CatalogValidationError as e:
                    raise CatalogValidationError(
                        f"Invalid rule path for {rule.origin.value} mode \"{mode.slug}\", "
                        f"rule \"{rule.id}\": {e.message}",
                        e.path,
                    ) from e
                if not full_path.is_file():
                    raise CatalogValidationError(
                        f"Rule file not found for {rule.origin.value} mode \"{mode.slug}\", "
                        f"rule \"{rule.id}\": {full_path} (sourcePath: \"{rule.source_path}\")",
                        full_path,
                    )


def load_definitions(repository: DefinitionRepository) -> DefinitionSet:
    """Load both catalogs from `repository` and return the merged set."""
    system = repository.load_system_catalog()
    user = repository.load_user_catalog()
    return DefinitionMerger(repository).merge(system, user)
