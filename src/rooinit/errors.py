"""
rooinit error taxonomy.

Every fatal condition in the definition/materialization pipeline raises a
subclass of RooInitError. The CLI is the single boundary that reports them.

    CatalogValidationError  - schema or referential-integrity violation
    SelectionError          - requested identifiers that do not exist
    ConflictError           - destination exists and force was not given
    MaterializationIOError  - any other file-system failure while writing
    UserAbortError          - clean, user-initiated termination
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence


class RooInitError(Exception):
    """Base class for all rooinit errors."""


class CatalogValidationError(RooInitError):
    """A catalog failed to load, parse, or validate."""
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        self.message = message
        super().__init__(message)


class SelectionError(RooInitError):
    """One or more requested mode or category slugs do not exist."""
    def __init__(self, invalid_mode_slugs: Sequence[str], invalid_category_slugs: Sequence[str]):
        self.invalid_mode_slugs: List[str] = list(invalid_mode_slugs)
        self.invalid_category_slugs: List[str] = list(invalid_category_slugs)
        super().__init__(
            "Invalid or unknown slugs provided. Please check your --modes or "
            f"--category arguments. Invalid items: {', '.join(self.invalid_items)}"
        )

    @property
    def invalid_items(self) -> List[str]:
        return (
            [f"mode: {slug}" for slug in self.invalid_mode_slugs]
            + [f"category: {slug}" for slug in self.invalid_category_slugs]
        )


class ConflictError(RooInitError):
    """A destination path already exists and force was not requested."""
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"File already exists: {path}. Use --force to overwrite.")


class MaterializationIOError(RooInitError):
    """Unexpected file-system failure while writing the target directory."""
    def __init__(self, message: str, path: Path, source_path: Optional[Path] = None):
        self.path = path
        self.source_path = source_path
        super().__init__(message)


class UserAbortError(RooInitError):
    """The user cancelled; not an error outcome."""
    def __init__(self, message: str = "Operation aborted by user."):
        super().__init__(message)
