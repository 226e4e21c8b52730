"""Pydantic models for the recommendation engine output."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, field_validator

AgentCategory = Literal[
    "review", "testing", "database", "security", "ui", "api", "devops", "docs", "perf", "general"
]
Priority = Literal["high", "medium", "low"]


def normalize_triggers(values: Iterable[str]) -> list[str]:
    """Lower-case, strip and de-duplicate trigger keywords, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        key = value.strip().lower()
        if key:
            seen.setdefault(key, None)
    return list(seen)


class AgentRecommendation(BaseModel):
    """A recommended agent, materialized from a catalog template."""

    id: str  # e.g. "code-reviewer"
    name: str
    category: AgentCategory = "general"
    confidence: int  # 0-100
    description: str  # imperative capability statement, used for routing
    reason: str = ""
    triggers: list[str]  # lower-cased, unique
    capabilities: list[str] = []
    relevant_files: list[str] = []  # glob patterns
    estimated_token_cost: int = 0

    @field_validator("confidence")
    @classmethod
    def check_confidence_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"confidence must be within 0-100, got {v}")
        return v

    @field_validator("triggers")
    @classmethod
    def check_triggers(cls, v: list[str]) -> list[str]:
        triggers = normalize_triggers(v)
        if not triggers:
            raise ValueError("an emitted agent needs at least one trigger")
        return triggers


class RuleRecommendation(BaseModel):
    """A recommended coding rule with the globs it applies to."""

    id: str
    title: str
    content: str  # markdown
    priority: Priority = "medium"
    reason: str = ""
    applies_to: list[str]
    category: str = ""

    @field_validator("applies_to")
    @classmethod
    def check_applies_to(cls, v: list[str]) -> list[str]:
        patterns = [p.strip() for p in v if p.strip()]
        if not patterns:
            raise ValueError("a rule must apply to at least one glob pattern")
        return patterns


class SkippedAgent(BaseModel):
    """A template whose score fell below the inclusion floor."""

    id: str
    name: str
    confidence: int
    reason: str = ""


class TemplateDiagnostic(BaseModel):
    """A catalog template that raised while being evaluated."""

    template_id: str
    stage: str  # "score" | "materialize" | "applies"
    message: str


class RecommendationResult(BaseModel):
    """Full output of one recommendation run."""

    agents: list[AgentRecommendation] = []
    rules: list[RuleRecommendation] = []
    skipped: list[SkippedAgent] = []
    diagnostics: list[TemplateDiagnostic] = []

    @property
    def total_tokens(self) -> int:
        return sum(a.estimated_token_cost for a in self.agents)
