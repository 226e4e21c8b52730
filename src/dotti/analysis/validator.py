"""Structural validation of AI-tool config files already present in a project.

Each artifact is checked against its destination's contract (frontmatter,
required keys, JSON shape, size) and then its activation globs are resolved
against the project to catch patterns that no longer match anything.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence

from dotti.adapters.contracts import GLOB_FIELDS, DestinationContract, FileContract, get_contract
from dotti.analysis.frontmatter import parse_frontmatter, strip_quotes
from dotti.analysis.globs import GlobResolver, count_all, extract_glob_patterns, is_universal, is_unsafe
from dotti.schemas.issues import Severity, ValidationIssue, ValidationResult
from dotti.schemas.tech_stack import ExistingArtifact
from dotti.shared.sizing import format_size, measure

logger = logging.getLogger(__name__)


def _issue(
    artifact: ExistingArtifact, severity: Severity, message: str, suggested_fix: str = ""
) -> ValidationIssue:
    return ValidationIssue(
        destination=artifact.destination,
        file_path=artifact.relative_path,
        severity=severity,
        message=message,
        suggested_fix=suggested_fix,
    )


def _activates(fields: dict[str, str], key: str) -> bool:
    """Glob keys need at least one pattern; flag keys need an explicit ``true``."""
    if key in GLOB_FIELDS:
        return bool(extract_glob_patterns({key: fields.get(key, "")}))
    return strip_quotes(fields.get(key, "")).strip().lower() == "true"


def check_markdown(artifact: ExistingArtifact, content: str, fc: FileContract) -> list[ValidationIssue]:
    """Frontmatter presence, identity keys and activation keys."""
    if not (fc.frontmatter_required or fc.error_keys or fc.warning_keys or fc.activation_keys):
        return []

    fm = parse_frontmatter(content)
    wanted = [*fc.error_keys, *fc.warning_keys, *fc.activation_keys]
    if not fm.found:
        if not fc.frontmatter_required:
            return []
        return [_issue(
            artifact, "error",
            f"{fc.label} missing YAML frontmatter (---)",
            "Add frontmatter with " + ", ".join(f"`{k}`" for k in wanted) + " fields",
        )]

    issues: list[ValidationIssue] = []
    for key in fc.error_keys:
        if not fm.fields.get(key):
            issues.append(_issue(
                artifact, "error",
                f"{fc.label} frontmatter missing `{key}` field",
                f"Add `{key}: ...` to frontmatter",
            ))
    for key in fc.warning_keys:
        if not fm.fields.get(key):
            issues.append(_issue(
                artifact, "warning",
                f"{fc.label} frontmatter missing `{key}` field",
                f"Add `{key}: ...` to frontmatter",
            ))
    if fc.activation_keys and not any(_activates(fm.fields, k) for k in fc.activation_keys):
        keys = " or ".join(f"`{k}`" for k in fc.activation_keys)
        issues.append(_issue(
            artifact, "warning",
            f"{fc.label} frontmatter has no activation: set {keys}",
            "Add `globs: **/*.ts` or set `alwaysApply: true`",
        ))
    return issues


def check_json(artifact: ExistingArtifact, content: str, fc: FileContract) -> list[ValidationIssue]:
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        return [_issue(artifact, "error", f"{fc.label} is not valid JSON", "Fix JSON syntax errors")]

    if fc.schema_key and (not isinstance(parsed, dict) or not parsed.get(fc.schema_key)):
        return [_issue(
            artifact, "warning",
            f"{fc.label} missing `{fc.schema_key}` field",
            f'Add `"{fc.schema_key}": "<schema URL>"`',
        )]
    return []


def check_size(
    artifact: ExistingArtifact, content: str, contract: DestinationContract, fc: FileContract
) -> list[ValidationIssue]:
    if contract.max_size is None or not fc.size_limited:
        return []
    unit = contract.size_unit
    size = measure(content, unit)
    if size <= contract.max_size:
        return []
    return [_issue(
        artifact, "error",
        f"File is {format_size(size, unit)}, exceeding {contract.display_name}'s "
        f"{format_size(contract.max_size, unit)} limit",
        contract.split_hint,
    )]


def check_placement(artifact: ExistingArtifact, fc: FileContract) -> list[ValidationIssue]:
    if fc.root_only and "/" in artifact.relative_path:
        return [_issue(artifact, "warning", fc.nested_message or f"Nested {fc.label} detected")]
    return []


async def check_globs(artifact: ExistingArtifact, content: str, resolver: GlobResolver) -> list[ValidationIssue]:
    """Flag unsafe, invalid and dead activation globs."""
    fm = parse_frontmatter(content)
    if not fm.found:
        return []

    issues: list[ValidationIssue] = []
    to_resolve: list[str] = []
    for pattern in extract_glob_patterns(fm.fields):
        if is_universal(pattern):
            continue
        if is_unsafe(pattern):
            issues.append(_issue(
                artifact, "error",
                f'Glob pattern "{pattern}" contains path traversal or absolute path',
                "Use relative patterns within the project (e.g., src/**/*.ts)",
            ))
            continue
        to_resolve.append(pattern)

    for pattern, count in zip(to_resolve, await count_all(resolver, to_resolve)):
        if count is None:
            issues.append(_issue(
                artifact, "warning", f'Invalid glob pattern: "{pattern}"', "Fix the glob syntax",
            ))
        elif count == 0:
            issues.append(_issue(
                artifact, "warning",
                f'Glob pattern "{pattern}" matches 0 files in the project',
                "Update the pattern to match actual project files, or remove if no longer needed",
            ))
    return issues


async def validate_artifact(artifact: ExistingArtifact, resolver: GlobResolver) -> list[ValidationIssue]:
    """All issues for one artifact, structural first, then globs."""
    contract = get_contract(artifact.destination)
    fc = contract.file_contract_for(artifact.relative_path)

    issues = check_placement(artifact, fc) if fc else []
    content = artifact.raw_content
    if content is None:
        issues.append(_issue(
            artifact, "warning",
            f"Could not read content ({artifact.size_bytes:,} bytes); content checks skipped",
        ))
        return issues

    if fc is not None:
        if fc.kind == "json":
            issues.extend(check_json(artifact, content, fc))
        else:
            issues.extend(check_markdown(artifact, content, fc))
        issues.extend(check_size(artifact, content, contract, fc))

    issues.extend(await check_globs(artifact, content, resolver))
    return issues


async def validate_artifacts(
    artifacts: Sequence[ExistingArtifact], resolver: GlobResolver
) -> ValidationResult:
    """Validate every artifact concurrently; issues keep the input order."""
    per_artifact = await asyncio.gather(*(validate_artifact(a, resolver) for a in artifacts))
    issues = [issue for batch in per_artifact for issue in batch]

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]
    failed = {i.file_path for i in errors}
    logger.debug("Validated %d artifacts: %d errors, %d warnings", len(artifacts), len(errors), len(warnings))

    return ValidationResult(
        found=len(artifacts),
        valid=len(artifacts) - len(failed),
        errors=errors,
        warnings=warnings,
    )
