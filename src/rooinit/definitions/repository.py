"""
Definition Repository

Loads the two catalogs rooinit draws from:

- System catalog: bundled, read-only. `modes.json` and `categories.json`
  (JSON arrays) plus a `rules/` tree. Any failure here is fatal.
- User catalog: `user-definitions.json` in the user config directory, with
  optional `customModes` / `customCategories` arrays, plus its own `rules/`
  tree. A missing file is an empty catalog; a broken one is logged as a
  warning and also treated as empty.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from rooinit.errors import CatalogValidationError
from rooinit.definitions.models import (
    Catalog,
    CategorySchema,
    ModeSchema,
    Origin,
    Provenance,
    Rule,
    UserDefinitionsSchema,
    category_from_schema,
    mode_from_schema,
)

logger = logging.getLogger(__name__)

MODES_FILE = "modes.json"
CATEGORIES_FILE = "categories.json"
USER_DEFINITIONS_FILE = "user-definitions.json"
RULES_DIR = "rules"

T = TypeVar("T")


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as `field.path - message` pairs."""
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{loc} - {item['msg']}")
    return ", ".join(parts)


def _check_unique(slugs: Iterable[str], kind: str, path: Path) -> None:
    seen = set()
    for slug in slugs:
        if slug in seen:
            raise CatalogValidationError(f"Duplicate {kind} slug \"{slug}\" in {path}", path)
        seen.add(slug)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogValidationError(f"Failed to read {path}: {e}", path) from e


class DefinitionRepository:
    """
    File locations and loaders for the system and user catalogs.

    Args:
        system_path: Directory holding modes.json, categories.json and rules/
        user_config_path: Directory holding user-definitions.json and rules/
    """

    def __init__(self, system_path: Path, user_config_path: Path):
        self.system_path = Path(system_path)
        self.user_config_path = Path(user_config_path)

    @property
    def system_rules_root(self) -> Path:
        return self.system_path / RULES_DIR

    @property
    def user_rules_root(self) -> Path:
        return self.user_config_path / RULES_DIR

    @property
    def user_definitions_file(self) -> Path:
        return self.user_config_path / USER_DEFINITIONS_FILE

    def rules_root_for(self, origin: Origin) -> Path:
        """Rule root matching the catalog a rule was read from."""
        if origin is Origin.USER:
            return self.user_rules_root
        return self.system_rules_root

    def rule_source(self, rule: Rule) -> Path:
        """
        Path of a rule file under the rule root of its origin.

        Raises:
            CatalogValidationError: sourcePath is absolute or climbs out of the root.
        """
        root = self.rules_root_for(rule.origin)
        source = root / rule.source_path
        try:
            source.resolve().relative_to(root.resolve())
        except ValueError:
            raise CatalogValidationError(
                f"Rule sourcePath \"{rule.source_path}\" is outside the {rule.origin.value} rules directory {root}",
                source,
            ) from None
        return source

    # =========================================================================
    # System catalog
    # =========================================================================

    def _load_system_array(self, file_name: str, schema: Type[T]) -> List[T]:
        path = self.system_path / file_name
        if not path.is_file():
            raise CatalogValidationError(f"System definition file not found at {path}", path)

        try:
            return TypeAdapter(List[schema]).validate_json(_read_text(path))
        except ValidationError as e:
            raise CatalogValidationError(
                f"Invalid system {file_name}: {format_validation_error(e)}", path
            ) from e

    def load_system_catalog(self) -> Catalog:
        """
        Load and validate the bundled catalog.

        Raises:
            CatalogValidationError: file missing, unparsable, or schema-invalid.
        """
        mode_records: Sequence[ModeSchema] = self._load_system_array(MODES_FILE, ModeSchema)
        category_records: Sequence[CategorySchema] = self._load_system_array(CATEGORIES_FILE, CategorySchema)

        _check_unique((m.slug for m in mode_records), "mode", self.system_path / MODES_FILE)
        _check_unique((c.slug for c in category_records), "category", self.system_path / CATEGORIES_FILE)

        catalog = Catalog(
            modes=tuple(mode_from_schema(m, Origin.SYSTEM, Provenance.SYSTEM) for m in mode_records),
            categories=tuple(category_from_schema(c, Provenance.SYSTEM) for c in category_records),
        )
        logger.debug(
            f"Loaded system catalog from {self.system_path}: "
            f"{len(catalog.modes)} modes, {len(catalog.categories)} categories"
        )
        return catalog

    # =========================================================================
    # User catalog
    # =========================================================================

    def _parse_user_catalog(self, path: Path) -> Catalog:
        try:
            document = UserDefinitionsSchema.model_validate_json(_read_text(path))
        except ValidationError as e:
            raise CatalogValidationError(
                f"Invalid structure in {path}: {format_validation_error(e)}", path
            ) from e

        _check_unique((m.slug for m in document.custom_modes), "mode", path)
        _check_unique((c.slug for c in document.custom_categories), "category", path)

        return Catalog(
            modes=tuple(mode_from_schema(m, Origin.USER, Provenance.CUSTOM) for m in document.custom_modes),
            categories=tuple(category_from_schema(c, Provenance.CUSTOM) for c in document.custom_categories),
        )

    def load_user_catalog(self) -> Catalog:
        """
        Load the user override catalog.

        Never raises for catalog problems: a missing file yields an empty
        catalog, a broken one is reported as a warning and ignored.
        """
        path = self.user_definitions_file
        if not path.exists():
            logger.debug(f"User definitions file not found at {path}")
            return Catalog()

        try:
            catalog = self._parse_user_catalog(path)
        except CatalogValidationError as e:
            logger.warning(f"{e.message}. Proceeding without user definitions.")
            return Catalog()

        logger.debug(
            f"Loaded user catalog from {path}: "
            f"{len(catalog.modes)} modes, {len(catalog.categories)} categories"
        )
        return catalog
