"""
Listing modes and categories by source.

    system  - entries from the bundled catalog only
    custom  - entries from the user catalog only
    all     - the merged, validated set with provenance tags
"""
from __future__ import annotations

from typing import List, Sequence, Union

from rooinit.definitions.merger import load_definitions
from rooinit.definitions.models import CategoryDefinition, ModeDefinition
from rooinit.definitions.repository import DefinitionRepository

SOURCES = ("custom", "system", "all")


def _check_source(source: str) -> str:
    source = (source or "custom").lower()
    if source not in SOURCES:
        raise ValueError(f"Invalid source value: {source}. Must be one of 'custom', 'system', or 'all'.")
    return source


def list_modes(repository: DefinitionRepository, source: str = "custom") -> List[ModeDefinition]:
    source = _check_source(source)
    if source == "system":
        return list(repository.load_system_catalog().modes)
    if source == "custom":
        return list(repository.load_user_catalog().modes)
    return list(load_definitions(repository).modes)


def list_categories(repository: DefinitionRepository, source: str = "custom") -> List[CategoryDefinition]:
    source = _check_source(source)
    if source == "system":
        return list(repository.load_system_catalog().categories)
    if source == "custom":
        return list(repository.load_user_catalog().categories)
    return list(load_definitions(repository).categories)


def definition_rows(definitions: Sequence[Union[ModeDefinition, CategoryDefinition]]) -> List[List[str]]:
    return [[d.slug, d.name, d.provenance.value, d.description] for d in definitions]


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Left-aligned plain-text columns. The last column is not padded."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def render(cells: Sequence[str]) -> str:
        padded = [c.ljust(widths[i]) for i, c in enumerate(cells[:-1])]
        return "  ".join(padded + [cells[-1]]).rstrip()

    rule = ["-" * w for w in widths[:-1]] + ["-" * len(headers[-1])]
    lines = [render(headers), render(rule)]
    lines.extend(render(row) for row in rows)
    return "\n".join(lines)
