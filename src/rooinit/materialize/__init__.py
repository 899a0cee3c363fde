"""
rooinit.materialize - Writing the selection into a project
"""

from rooinit.materialize.engine import (
    FileOutcome,
    MaterializationEngine,
    MaterializationOutcome,
    MaterializationReport,
    render_manifest,
)

__all__ = [
    "FileOutcome",
    "MaterializationEngine",
    "MaterializationOutcome",
    "MaterializationReport",
    "render_manifest",
]
