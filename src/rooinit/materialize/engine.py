"""
Materialization Engine

Writes a resolved selection into a target project directory:

    <target>/.roomodes              manifest, one entry per selected mode
    <target>/.roo/rules/            generic rules shared by every mode
    <target>/.roo/rules-<slug>/     rules specific to one mode

Steps run strictly in order, one file operation at a time:

1. ensure the shared and per-mode rule directories exist
2. write the manifest - an existing manifest without force is a fatal
   ConflictError, raised before any rule file is touched
3. copy each rule from the rule root of the catalog it came from; a
   generic rule used by several modes is copied once; an existing
   destination without force is skipped with a warning, as is a
   different rule whose file name lands on a destination already written
4. report what happened to every destination path

Any other OSError is wrapped in MaterializationIOError with the path
involved and propagates. Nothing is retried.
"""
from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from rooinit.errors import ConflictError, MaterializationIOError
from rooinit.definitions.models import ModeDefinition, Origin, Rule
from rooinit.definitions.repository import DefinitionRepository

logger = logging.getLogger(__name__)

MANIFEST_NAME = ".roomodes"
RULES_BASE_DIR = ".roo"
SHARED_RULES_DIR = "rules"


class MaterializationOutcome(str, Enum):
    WRITTEN = "written"
    SKIPPED_CONFLICT = "skipped-conflict"
    OVERWRITTEN = "overwritten"


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    outcome: MaterializationOutcome
    mode_slug: Optional[str] = None
    rule_id: Optional[str] = None


@dataclass
class MaterializationReport:
    """What happened to each destination path, in processing order."""
    target_dir: Path
    manifest: Optional[FileOutcome] = None
    rule_files: List[FileOutcome] = field(default_factory=list)

    @property
    def outcomes(self) -> List[FileOutcome]:
        head = [self.manifest] if self.manifest else []
        return head + self.rule_files

    def by_outcome(self, outcome: MaterializationOutcome) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.outcome is outcome]

    @property
    def skipped(self) -> List[FileOutcome]:
        return self.by_outcome(MaterializationOutcome.SKIPPED_CONFLICT)

    def counts(self) -> Dict[str, int]:
        counts = {o.value: 0 for o in MaterializationOutcome}
        for item in self.outcomes:
            counts[item.outcome.value] += 1
        return counts


def render_manifest(modes: Sequence[ModeDefinition]) -> str:
    """Manifest document for `modes`. Same input always renders the same text."""
    document = {"customModes": [mode.to_manifest_entry() for mode in modes]}
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


class MaterializationEngine:
    """
    Writes manifest and rule files for a list of resolved modes.

    Args:
        repository: Supplies the system and user rule roots
        target_dir: Project directory to write into
        force: Overwrite existing files instead of failing/skipping
        manifest_name: File name of the manifest at the target root
        rules_base_dir: Directory (relative to target) holding rule folders
    """

    def __init__(
        self,
        repository: DefinitionRepository,
        target_dir: Path,
        force: bool = False,
        manifest_name: str = MANIFEST_NAME,
        rules_base_dir: str = RULES_BASE_DIR,
    ):
        self.repository = repository
        self.target_dir = Path(target_dir)
        self.force = force
        self.manifest_name = manifest_name
        self.rules_base_dir = rules_base_dir

    # =========================================================================
    # Paths
    # =========================================================================

    @property
    def manifest_path(self) -> Path:
        return self.target_dir / self.manifest_name

    @property
    def shared_rules_dir(self) -> Path:
        return self.target_dir / self.rules_base_dir / SHARED_RULES_DIR

    def mode_rules_dir(self, mode_slug: str) -> Path:
        return self.target_dir / self.rules_base_dir / f"rules-{mode_slug}"

    def destination_for(self, mode: ModeDefinition, rule: Rule) -> Path:
        folder = self.shared_rules_dir if rule.is_generic else self.mode_rules_dir(mode.slug)
        return folder / rule.file_name

    def source_for(self, rule: Rule) -> Path:
        return self.repository.rule_source(rule)

    # =========================================================================
    # Steps
    # =========================================================================

    def ensure_directories(self, modes: Sequence[ModeDefinition]) -> None:
        folders = [self.shared_rules_dir] + [self.mode_rules_dir(m.slug) for m in modes]
        for folder in folders:
            try:
                folder.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MaterializationIOError(f"Failed to create directory {folder}: {e}", folder) from e

    def write_manifest(self, modes: Sequence[ModeDefinition]) -> FileOutcome:
        """
        Raises:
            ConflictError: manifest exists and force is off. Nothing written.
            MaterializationIOError: the write itself failed.
        """
        path = self.manifest_path
        existed = path.exists()
        if existed and not self.force:
            raise ConflictError(path)

        content = render_manifest(modes)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise MaterializationIOError(f"Failed to write manifest {path}: {e}", path) from e

        outcome = MaterializationOutcome.OVERWRITTEN if existed else MaterializationOutcome.WRITTEN
        logger.info(f"{self.manifest_name} configured with {len(modes)} mode(s): {path}")
        return FileOutcome(path, outcome)

    def copy_rule(self, mode: ModeDefinition, rule: Rule, destination: Path) -> FileOutcome:
        existed = destination.exists()
        if existed and not self.force:
            logger.warning(
                f"Rule file already exists, skipping: {destination}. Use --force to overwrite."
            )
            return FileOutcome(destination, MaterializationOutcome.SKIPPED_CONFLICT, mode.slug, rule.id)

        source = self.source_for(rule)
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise MaterializationIOError(
                f"Failed to copy rule \"{rule.id}\" for mode \"{mode.slug}\": {e}",
                destination,
                source_path=source,
            ) from e

        outcome = MaterializationOutcome.OVERWRITTEN if existed else MaterializationOutcome.WRITTEN
        logger.debug(f"Copied rule file: {destination}")
        return FileOutcome(destination, outcome, mode.slug, rule.id)

    def copy_rules(self, modes: Sequence[ModeDefinition]) -> List[FileOutcome]:
        outcomes: List[FileOutcome] = []
        # destination -> (origin, sourcePath) of the rule that claimed it
        handled: Dict[Path, Tuple[Origin, str]] = {}
        for mode in modes:
            for rule in mode.rules:
                destination = self.destination_for(mode, rule)
                key = (rule.origin, rule.source_path)
                claimed = handled.get(destination)
                if claimed == key:
                    continue
                if claimed is not None:
                    logger.warning(
                        f"Rule \"{rule.id}\" of mode \"{mode.slug}\" ({rule.source_path}) maps to "
                        f"{destination}, already written from {claimed[1]} in this run, skipping."
                    )
                    outcomes.append(
                        FileOutcome(destination, MaterializationOutcome.SKIPPED_CONFLICT, mode.slug, rule.id)
                    )
                    continue
                handled[destination] = key
                outcomes.append(self.copy_rule(mode, rule, destination))
        return outcomes

    # =========================================================================
    # Pipeline
    # =========================================================================

    def materialize(self, modes: Sequence[ModeDefinition]) -> MaterializationReport:
        """Run all steps for `modes` and return the per-file report."""
        report = MaterializationReport(target_dir=self.target_dir)

        self.ensure_directories(modes)
        report.manifest = self.write_manifest(modes)
        report.rule_files = self.copy_rules(modes)

        counts = report.counts()
        logger.info(
            f"Files: {counts['written']} written, {counts['overwritten']} overwritten, "
            f"{counts['skipped-conflict']} skipped"
        )
        return report
