"""
rooinit.definitions - Catalog loading and merging

- DefinitionRepository: loads the system catalog (fatal on failure) and the
  user override catalog (warns and falls back to empty)
- DefinitionMerger: override-by-slug merge with provenance tagging, then
  category and rule-path cross-validation
"""

from rooinit.definitions.models import (
    Capability,
    Catalog,
    CategoryDefinition,
    ModeDefinition,
    NamedCapability,
    Origin,
    Provenance,
    Rule,
    ScopedCapability,
)
from rooinit.definitions.repository import DefinitionRepository
from rooinit.definitions.merger import (
    DefinitionMerger,
    DefinitionSet,
    load_definitions,
    overlay,
)

__all__ = [
    # Models
    "Capability",
    "Catalog",
    "CategoryDefinition",
    "ModeDefinition",
    "NamedCapability",
    "Origin",
    "Provenance",
    "Rule",
    "ScopedCapability",
    # Loading
    "DefinitionRepository",
    # Merging
    "DefinitionMerger",
    "DefinitionSet",
    "load_definitions",
    "overlay",
]
