"""Prune analyzer — finds config files that are safe to delete."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence

from dotti.analysis.frontmatter import parse_frontmatter
from dotti.analysis.globs import GlobResolver, count_all, extract_glob_patterns, is_universal, is_unsafe
from dotti.schemas.issues import PruneCandidate, PruneResult
from dotti.schemas.tech_stack import ExistingArtifact

logger = logging.getLogger(__name__)

# Fewer non-whitespace characters than this after the frontmatter means empty.
MIN_MEANINGFUL_CHARS = 10

_WHITESPACE = re.compile(r"\s")


def _candidate(artifact: ExistingArtifact, reason: str, message: str) -> PruneCandidate:
    return PruneCandidate(
        destination=artifact.destination,
        file_path=artifact.relative_path,
        reason=reason,  # type: ignore[arg-type]
        message=message,
        size_bytes=artifact.size_bytes,
    )


def check_empty(artifact: ExistingArtifact, content: str) -> PruneCandidate | None:
    meaningful = _WHITESPACE.sub("", parse_frontmatter(content).body)
    if len(meaningful) >= MIN_MEANINGFUL_CHARS:
        return None
    return _candidate(
        artifact, "empty-content",
        f"Config has {len(meaningful)} chars of content (effectively empty)",
    )


async def check_dead_globs(
    artifact: ExistingArtifact, content: str, resolver: GlobResolver
) -> PruneCandidate | None:
    """Flag an artifact only when every specific pattern matches nothing.

    Universal patterns are ignored, unsafe ones are skipped without resolving
    and invalid ones count as zero; the validator reports those separately.
    """
    fm = parse_frontmatter(content)
    if not fm.found:
        return None
    specific = [p for p in extract_glob_patterns(fm.fields) if not is_universal(p)]
    if not specific:
        return None

    counts = await count_all(resolver, [p for p in specific if not is_unsafe(p)])
    if sum(c or 0 for c in counts) > 0:
        return None
    return _candidate(
        artifact, "dead-globs", f"All glob patterns match 0 files: {', '.join(specific)}",
    )


async def check_artifact(artifact: ExistingArtifact, resolver: GlobResolver) -> PruneCandidate | None:
    """Empty content wins over dead globs; an artifact is flagged for one reason at most."""
    content = artifact.raw_content
    if content is None:
        return None
    return check_empty(artifact, content) or await check_dead_globs(artifact, content, resolver)


async def find_prune_candidates(
    artifacts: Sequence[ExistingArtifact], resolver: GlobResolver
) -> PruneResult:
    results = await asyncio.gather(*(check_artifact(a, resolver) for a in artifacts))
    candidates = [c for c in results if c is not None]
    logger.debug("Scanned %d artifacts, %d prune candidates", len(artifacts), len(candidates))
    return PruneResult(scanned=len(artifacts), candidates=candidates)
