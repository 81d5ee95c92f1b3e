# File: crudgen/assembler.py
"""
NexaFlow CrudGen - Artifact Assembler
======================================
Pairs rendered artifact bodies with their destination paths.

Layout under the SPA source root::

    models/{singularCamel}.model.ts
    services/{singularCamel}.service.ts
    components/{pluralCamel}-list/{pluralCamel}-list.{ts,html,css}
    components/{pluralCamel}-form/{pluralCamel}-form.{ts,html,css}

Paths depend only on the naming bundle and the base path, so the same
table always lands in the same eight files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from crudgen.models import ARTIFACT_FILE_TYPES, ArtifactKind, GeneratedFile
from crudgen.naming import NamingBundle

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.assembler")

# ---------------------------------------------------------------------------
# Directory conventions
# ---------------------------------------------------------------------------

MODELS_DIR: str = "models"
SERVICES_DIR: str = "services"
COMPONENTS_DIR: str = "components"

LIST_SUFFIX: str = "-list"
FORM_SUFFIX: str = "-form"

# Fixed emission order
ARTIFACT_ORDER: List[ArtifactKind] = [
    ArtifactKind.MODEL,
    ArtifactKind.SERVICE,
    ArtifactKind.LIST_LOGIC,
    ArtifactKind.LIST_MARKUP,
    ArtifactKind.LIST_STYLE,
    ArtifactKind.FORM_LOGIC,
    ArtifactKind.FORM_MARKUP,
    ArtifactKind.FORM_STYLE,
]


def component_dir_name(naming: NamingBundle, suffix: str) -> str:
    """Folder (and file stem) of a component: ``orderItems-list``."""
    return f"{naming.plural_camel}{suffix}"


def artifact_paths(naming: NamingBundle, base_path: Path) -> Dict[ArtifactKind, Path]:
    """Destination path of every artifact for one table."""
    base: Path = Path(base_path)
    list_stem: str = component_dir_name(naming, LIST_SUFFIX)
    form_stem: str = component_dir_name(naming, FORM_SUFFIX)
    list_dir: Path = base / COMPONENTS_DIR / list_stem
    form_dir: Path = base / COMPONENTS_DIR / form_stem

    return {
        ArtifactKind.MODEL: base / MODELS_DIR / f"{naming.singular_camel}.model.ts",
        ArtifactKind.SERVICE: base / SERVICES_DIR / f"{naming.singular_camel}.service.ts",
        ArtifactKind.LIST_LOGIC: list_dir / f"{list_stem}.ts",
        ArtifactKind.LIST_MARKUP: list_dir / f"{list_stem}.html",
        ArtifactKind.LIST_STYLE: list_dir / f"{list_stem}.css",
        ArtifactKind.FORM_LOGIC: form_dir / f"{form_stem}.ts",
        ArtifactKind.FORM_MARKUP: form_dir / f"{form_stem}.html",
        ArtifactKind.FORM_STYLE: form_dir / f"{form_stem}.css",
    }


def assemble_artifacts(
    bodies: Dict[ArtifactKind, str],
    naming: NamingBundle,
    base_path: Path,
) -> List[GeneratedFile]:
    """
    Build ``GeneratedFile`` records for the rendered *bodies*.

    Files come back in ``ARTIFACT_ORDER``; kinds missing from *bodies* are
    skipped.
    """
    paths: Dict[ArtifactKind, Path] = artifact_paths(naming, base_path)
    files: List[GeneratedFile] = []

    for kind in ARTIFACT_ORDER:
        if kind not in bodies:
            continue
        path: Path = paths[kind]
        files.append(
            GeneratedFile(
                file_name=path.name,
                file_path=str(path),
                file_type=ARTIFACT_FILE_TYPES[kind],
                kind=kind,
                content=bodies[kind],
            )
        )

    logger.debug("Assembled %d files for %s", len(files), naming.class_name)
    return files


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MODELS_DIR",
    "SERVICES_DIR",
    "COMPONENTS_DIR",
    "LIST_SUFFIX",
    "FORM_SUFFIX",
    "ARTIFACT_ORDER",
    "component_dir_name",
    "artifact_paths",
    "assemble_artifacts",
]

logger.debug("crudgen.assembler loaded.")
