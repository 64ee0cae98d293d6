"""File discovery for the indexing pipeline.

Bit.BlazorUI nests components as ``Components/{Category}/{Component}/``;
Bit.BlazorUI.Extras mostly uses a flat ``Components/{Component}/`` layout.
Both are handled by looking one level deeper whenever a first-level
directory holds no main component file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from blazorseek.indexer.examples import DEMO_COMPONENTS_DIR

logger = logging.getLogger(__name__)

COMPONENT_ROOTS: tuple[Path, ...] = (
    Path("src", "BlazorUI", "Bit.BlazorUI", "Components"),
    Path("src", "BlazorUI", "Bit.BlazorUI.Extras", "Components"),
)
DOCS_ROOT: Path = DEMO_COMPONENTS_DIR
DOC_FILE_PATTERN = "*Demo.razor"

_RAZOR_CS_SUFFIX = ".razor.cs"


def _is_component_file(path: Path) -> bool:
    return path.is_file() and path.name.startswith("Bit") and path.name.endswith(".cs")


def find_main_component_file(directory: Path) -> Path | None:
    """The component's code file: ``Bit*.razor.cs`` if present, else a plain ``Bit*.cs``."""
    try:
        candidates = sorted(p for p in directory.iterdir() if _is_component_file(p))
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return None
    for p in candidates:
        if p.name.endswith(_RAZOR_CS_SUFFIX):
            return p
    for p in candidates:
        if not p.name.lower().endswith(_RAZOR_CS_SUFFIX):
            return p
    return None


def _subdirs(directory: Path) -> list[Path]:
    try:
        return sorted(p for p in directory.iterdir() if p.is_dir())
    except OSError as e:
        logger.warning("Skipping unreadable directory %s: %s", directory, e)
        return []


def find_component_dirs(repo_path: Path, roots: tuple[Path, ...] = COMPONENT_ROOTS) -> list[Path]:
    """Every directory that holds a component, deduplicated case-insensitively."""
    found: list[Path] = []
    seen: set[str] = set()

    def add(d: Path) -> None:
        key = str(d).lower()
        if key not in seen:
            seen.add(key)
            found.append(d)

    for root in roots:
        components_path = repo_path / root
        if not components_path.is_dir():
            logger.debug("Components directory not found: %s", components_path)
            continue
        for first_level in _subdirs(components_path):
            if find_main_component_file(first_level) is not None:
                add(first_level)
            else:
                for nested in _subdirs(first_level):
                    add(nested)

    logger.debug("Found %d component directories", len(found))
    return found


def find_documentation_files(repo_path: Path, docs_root: Path = DOCS_ROOT) -> list[Path]:
    """All ``*Demo.razor`` pages under the demo project's component pages."""
    docs_path = repo_path / docs_root
    if not docs_path.is_dir():
        logger.warning("Documentation directory not found: %s", docs_path)
        return []
    files = sorted(p for p in docs_path.rglob(DOC_FILE_PATTERN) if p.is_file())
    logger.debug("Found %d documentation files", len(files))
    return files
