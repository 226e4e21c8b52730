"""Assemble a ``TechStackSnapshot`` for a project on disk."""

from __future__ import annotations

import logging
from pathlib import Path

from dotti.scanner.file_tree import scan_file_tree
from dotti.scanner.packages import scan_packages
from dotti.schemas.tech_stack import TechStackSnapshot, ToolInfo
from dotti.shared.codebase_reader import CodebaseReader

logger = logging.getLogger(__name__)

# Significant-path label -> deployment tool
DEPLOYMENT_SIGNALS: tuple[tuple[str, str], ...] = (
    ("GitHub Actions", "GitHub Actions"),
    ("Docker config", "Docker"),
    ("Kubernetes", "Kubernetes"),
    ("Terraform IaC", "Terraform"),
)


def build_snapshot(root: str | Path, reader: CodebaseReader | None = None) -> TechStackSnapshot:
    """Scan manifests, the file tree and existing AI configs under ``root``."""
    reader = reader or CodebaseReader(root)
    manifests = scan_packages(reader)
    file_tree, languages = scan_file_tree(reader)
    deployment = tuple(
        ToolInfo(name=tool) for label, tool in DEPLOYMENT_SIGNALS if label in file_tree.significant_paths
    )

    snapshot = TechStackSnapshot(
        project_name=manifests.project_name or reader.root.name,
        languages=languages,
        frameworks=tuple(manifests.frameworks),
        build_tools=tuple(manifests.build_tools),
        testing=tuple(manifests.testing),
        databases=tuple(manifests.databases),
        styling=tuple(manifests.styling),
        linting=tuple(manifests.linting),
        deployment=deployment,
        package_manager=manifests.package_manager,
        file_tree=file_tree,
        existing_artifacts=tuple(reader.discover_artifacts()),
    )
    logger.debug(
        "Snapshot for %s: %d languages, %d frameworks, %d existing artifacts",
        snapshot.project_name, len(snapshot.languages), len(snapshot.frameworks),
        len(snapshot.existing_artifacts),
    )
    return snapshot
