"""Cursor adapter — glob-activated ``.mdc`` rule files plus an AGENTS.md summary."""

from __future__ import annotations

from dotti.adapters.base import BaseAdapter
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import RecommendationResult, RuleRecommendation
from dotti.schemas.tech_stack import Destination, TechStackSnapshot


class CursorAdapter(BaseAdapter):
    """Destination B: one ``.mdc`` per rule with ``description``, ``globs`` and ``alwaysApply``."""

    @property
    def destination(self) -> Destination:
        return "cursor"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        files = [self._mdc_file(rule) for rule in recommendations.rules]
        if recommendations.agents:
            files.append(self._agents_md(snapshot, recommendations))
        return files

    def _mdc_file(self, rule: RuleRecommendation) -> DestinationArtifact:
        lines = [
            "---",
            f"description: {rule.title}",
            f"globs: {', '.join(rule.applies_to)}",
            f"alwaysApply: {'true' if rule.priority == 'high' else 'false'}",
            "---",
            "",
            rule.content,
        ]
        return self.artifact(f".cursor/rules/{rule.id}.mdc", lines, f"{rule.title} rule for Cursor")

    def _agents_md(self, snapshot: TechStackSnapshot, rec: RecommendationResult) -> DestinationArtifact:
        lines = [f"# {snapshot.project_name}: Agent Instructions", ""]
        for agent in rec.agents:
            lines.extend([
                f"## {agent.name}",
                agent.description,
                "",
                f"**Triggers:** {', '.join(agent.triggers)}",
                "",
            ])
        return self.artifact("AGENTS.md", lines, "Agent instructions for Cursor")
