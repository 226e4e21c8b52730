"""Pydantic models for the validate / fix / prune analyzers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from dotti.schemas.tech_stack import Destination

Severity = Literal["error", "warning"]


class ValidationIssue(BaseModel):
    """A structural or glob-liveness problem in one existing artifact."""

    destination: Destination
    file_path: str
    severity: Severity
    message: str
    suggested_fix: str = ""


class ValidationResult(BaseModel):
    """Output of ``validate_artifacts``."""

    found: int = 0
    valid: int = 0
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []


class ParsedAgentRecord(BaseModel):
    """An agent recovered by re-reading artifact text.

    Any field may be empty; the text is free-form and the parse is lossy.
    """

    destination: Destination
    source_file: str
    name: str = ""
    description: str = ""
    triggers: list[str] = []


class ConflictIssue(BaseModel):
    """A routing problem between (or within) recovered agents."""

    type: Literal["overlap", "vague", "duplicate"]
    severity: Severity = "warning"
    destinations: list[Destination] = []
    file_paths: list[str] = []
    message: str
    suggested_fix: str = ""
    shared_triggers: list[str] = []


class ConflictReport(BaseModel):
    """Output of ``analyze_agents``."""

    agents: list[ParsedAgentRecord] = []
    issues: list[ConflictIssue] = []


class PruneCandidate(BaseModel):
    """An artifact that looks safe to delete."""

    destination: Destination
    file_path: str
    reason: Literal["empty-content", "dead-globs"]
    message: str
    size_bytes: int = 0


class PruneResult(BaseModel):
    """Output of ``find_prune_candidates``."""

    scanned: int = 0
    candidates: list[PruneCandidate] = []

    @property
    def recoverable_bytes(self) -> int:
        return sum(c.size_bytes for c in self.candidates)
