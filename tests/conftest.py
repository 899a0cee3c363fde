"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rooinit.definitions import DefinitionRepository


# =============================================================================
# RECORD BUILDERS
# =============================================================================

def rule_record(rule_id: str, source_path: str, is_generic: bool = False) -> dict:
    return {
        "id": rule_id,
        "name": rule_id.replace("_", " ").title(),
        "description": f"Rule {rule_id}",
        "sourcePath": source_path,
        "isGeneric": is_generic,
    }


def mode_record(
    slug: str,
    categories: List[str],
    rules: Optional[List[dict]] = None,
    **extra,
) -> dict:
    record = {
        "slug": slug,
        "name": slug.replace("-", " ").title(),
        "description": f"{slug} mode",
        "categorySlugs": categories,
        "associatedRuleFiles": rules or [],
    }
    record.update(extra)
    return record


def category_record(slug: str, name: Optional[str] = None) -> dict:
    return {
        "slug": slug,
        "name": name or slug.title(),
        "description": f"{slug} category",
    }


# =============================================================================
# CATALOG WRITERS
# =============================================================================

def write_rules(root: Path, rules: Dict[str, str]) -> None:
    for rel_path, content in rules.items():
        path = root / "rules" / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def write_system_catalog(
    root: Path,
    modes: List[dict],
    categories: List[dict],
    rules: Optional[Dict[str, str]] = None,
) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "modes.json").write_text(json.dumps(modes), encoding="utf-8")
    (root / "categories.json").write_text(json.dumps(categories), encoding="utf-8")
    write_rules(root, rules or {})
    return root


def write_user_catalog(
    root: Path,
    modes: Optional[List[dict]] = None,
    categories: Optional[List[dict]] = None,
    rules: Optional[Dict[str, str]] = None,
) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    document = {}
    if modes is not None:
        document["customModes"] = modes
    if categories is not None:
        document["customCategories"] = categories
    (root / "user-definitions.json").write_text(json.dumps(document), encoding="utf-8")
    write_rules(root, rules or {})
    return root


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def system_dir(tmp_path: Path) -> Path:
    """
    System catalog with category `core` and mode `code` holding one generic
    rule (intro.md) and one specific rule (style.md).
    """
    return write_system_catalog(
        tmp_path / "system",
        modes=[
            mode_record(
                "code",
                ["core"],
                rules=[
                    rule_record("intro", "generic/intro.md", is_generic=True),
                    rule_record("style", "code/style.md"),
                ],
                groups=["read", ["edit", {"fileRegex": "\\.py$", "description": "Python only"}]],
                customInstructions="Write tests.",
            ),
        ],
        categories=[category_record("core")],
        rules={
            "generic/intro.md": "# Intro\nShared rule.\n",
            "code/style.md": "# Style\nCode rule.\n",
        },
    )


@pytest.fixture
def user_dir(tmp_path: Path) -> Path:
    """Empty user config directory (no user-definitions.json)."""
    path = tmp_path / "user"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def repository(system_dir: Path, user_dir: Path) -> DefinitionRepository:
    return DefinitionRepository(system_dir, user_dir)
