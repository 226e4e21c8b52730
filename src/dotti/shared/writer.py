"""Persist generated artifacts under a project root."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from dotti.adapters.contracts import destination_for_path
from dotti.schemas.artifacts import DestinationArtifact

logger = logging.getLogger(__name__)


class WriteReport(BaseModel):
    written: list[str] = []
    skipped: list[str] = []  # already on disk and ``force`` was off
    superseded: list[str] = []  # "path (destination)" dropped for another destination's copy


def _pick_writers(artifacts: list[DestinationArtifact]) -> tuple[list[DestinationArtifact], list[str]]:
    """One artifact per path.

    The destination whose discovery patterns claim the path wins (codex owns
    ``AGENTS.md``); when none does, the first artifact for the path wins.
    """
    by_path: dict[str, list[DestinationArtifact]] = {}
    for artifact in artifacts:
        by_path.setdefault(artifact.relative_path, []).append(artifact)

    chosen: list[DestinationArtifact] = []
    superseded: list[str] = []
    for rel, candidates in by_path.items():
        owner = destination_for_path(rel)
        winner = next((a for a in candidates if a.destination == owner), candidates[0])
        chosen.append(winner)
        for artifact in candidates:
            if artifact is not winner:
                logger.info("%s from %s superseded by %s", rel, artifact.destination, winner.destination)
                superseded.append(f"{rel} ({artifact.destination})")
    return chosen, superseded


def write_artifacts(
    root: str | Path, artifacts: list[DestinationArtifact], *, force: bool = False
) -> WriteReport:
    """Write each artifact, creating parent directories.

    Existing files are left alone unless ``force`` is set. Several destinations
    can produce the same path (``AGENTS.md``); only one copy is written and the
    others are listed in ``superseded``.
    """
    root = Path(root)
    chosen, superseded = _pick_writers(artifacts)
    report = WriteReport(superseded=superseded)
    for artifact in chosen:
        rel = artifact.relative_path
        target = root / rel
        if target.exists() and not force:
            report.skipped.append(rel)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(artifact.content)
        logger.debug("Wrote %s (%d bytes)", rel, artifact.size_bytes)
        report.written.append(rel)
    return report
