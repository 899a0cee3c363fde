"""
Definition Models

Two layers live here:

1. Pydantic schemas describing the on-disk JSON records (camelCase keys).
   They are used only to validate what was read from a catalog.
2. Frozen dataclasses that the rest of rooinit works with. Once a catalog
   is loaded these are never mutated; the merger builds new instances when
   it needs to retag provenance.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# PROVENANCE
# =============================================================================

class Provenance(str, Enum):
    """Where a merged definition came from."""

    SYSTEM = "system"
    CUSTOM = "custom"
    CUSTOM_OVERRIDE = "custom-override"


class Origin(str, Enum):
    """Which catalog a record was read from. Decides the rule root."""

    SYSTEM = "system"
    USER = "user"


# =============================================================================
# ON-DISK SCHEMAS
# =============================================================================

class _Record(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)


class RuleSchema(_Record):
    id: str
    name: str
    description: str
    source_path: str = Field(alias="sourcePath")
    is_generic: bool = Field(alias="isGeneric")


class CategorySchema(_Record):
    slug: str
    name: str
    description: str


# A capability entry is either a bare group name or a [name, options] pair
GroupEntry = Union[str, Tuple[str, Dict[str, Any]]]


class ModeSchema(_Record):
    slug: str
    name: str
    description: str
    custom_instructions: Optional[str] = Field(default=None, alias="customInstructions")
    groups: Optional[List[GroupEntry]] = None
    category_slugs: List[str] = Field(alias="categorySlugs")
    associated_rule_files: List[RuleSchema] = Field(alias="associatedRuleFiles")


class UserDefinitionsSchema(_Record):
    """Shape of user-definitions.json."""
    custom_modes: List[ModeSchema] = Field(default_factory=list, alias="customModes")
    custom_categories: List[CategorySchema] = Field(default_factory=list, alias="customCategories")


# =============================================================================
# CAPABILITIES
# =============================================================================

@dataclass(frozen=True)
class NamedCapability:
    """A plain capability group, e.g. "read"."""
    name: str

    def to_json(self) -> Any:
        return self.name


@dataclass(frozen=True)
class ScopedCapability:
    """A capability restricted by a filter, e.g. edit limited to *.md files."""
    name: str
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def description(self) -> Optional[str]:
        return self.options.get("description")

    @property
    def file_regex(self) -> Optional[str]:
        return self.options.get("fileRegex")

    def to_json(self) -> Any:
        return [self.name, dict(self.options)]


Capability = Union[NamedCapability, ScopedCapability]


def capability_from_entry(entry: GroupEntry) -> Capability:
    if isinstance(entry, str):
        return NamedCapability(entry)
    name, options = entry
    return ScopedCapability(name, dict(options))


# =============================================================================
# DOMAIN TYPES
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """A rule document associated with a mode."""
    id: str
    name: str
    description: str
    source_path: str  # Relative to the rule root of `origin`
    is_generic: bool  # Shared across modes vs. mode-specific
    origin: Origin = Origin.SYSTEM

    @property
    def file_name(self) -> str:
        return self.source_path.replace("\\", "/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class CategoryDefinition:
    slug: str
    name: str
    description: str
    provenance: Provenance = Provenance.SYSTEM

    def with_provenance(self, provenance: Provenance) -> "CategoryDefinition":
        return replace(self, provenance=provenance)


@dataclass(frozen=True)
class ModeDefinition:
    slug: str
    name: str
    description: str
    category_slugs: Tuple[str, ...] = ()
    rules: Tuple[Rule, ...] = ()
    custom_instructions: Optional[str] = None
    groups: Optional[Tuple[Capability, ...]] = None
    provenance: Provenance = Provenance.SYSTEM

    def with_provenance(self, provenance: Provenance) -> "ModeDefinition":
        return replace(self, provenance=provenance)

    def in_category(self, category_slug: str) -> bool:
        return category_slug in self.category_slugs

    def to_manifest_entry(self) -> Dict[str, Any]:
        """Exported fields written to the manifest."""
        entry: Dict[str, Any] = {
            "slug": self.slug,
            "name": self.name,
            "roleDefinition": self.description,
        }
        if self.custom_instructions is not None:
            entry["customInstructions"] = self.custom_instructions
        if self.groups is not None:
            entry["groups"] = [cap.to_json() for cap in self.groups]
        entry["source"] = self.provenance.value
        return entry


@dataclass(frozen=True)
class Catalog:
    """Modes and categories read from a single source."""
    modes: Tuple[ModeDefinition, ...] = ()
    categories: Tuple[CategoryDefinition, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.modes and not self.categories


# =============================================================================
# SCHEMA -> DOMAIN
# =============================================================================

def rule_from_schema(record: RuleSchema, origin: Origin) -> Rule:
    return Rule(
        id=record.id,
        name=record.name,
        description=record.description,
        source_path=record.source_path,
        is_generic=record.is_generic,
        origin=origin,
    )


def mode_from_schema(record: ModeSchema, origin: Origin, provenance: Provenance) -> ModeDefinition:
    groups = None
    if record.groups is not None:
        groups = tuple(capability_from_entry(entry) for entry in record.groups)
    return ModeDefinition(
        slug=record.slug,
        name=record.name,
        description=record.description,
        category_slugs=tuple(record.category_slugs),
        rules=tuple(rule_from_schema(r, origin) for r in record.associated_rule_files),
        custom_instructions=record.custom_instructions,
        groups=groups,
        provenance=provenance,
    )


def category_from_schema(record: CategorySchema, provenance: Provenance) -> CategoryDefinition:
    return CategoryDefinition(
        slug=record.slug,
        name=record.name,
        description=record.description,
        provenance=provenance,
    )
