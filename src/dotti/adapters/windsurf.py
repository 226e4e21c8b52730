"""Windsurf adapter — one compact ``.windsurfrules`` file, truncated at 6,000 chars."""

from __future__ import annotations

from dotti.adapters.base import BaseAdapter, stack_summary
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot

MAX_ROLES = 5
ROLE_DESCRIPTION_CHARS = 120


class WindsurfAdapter(BaseAdapter):
    """Destination E: space is tight, so only high-priority rules and condensed roles go in."""

    @property
    def destination(self) -> Destination:
        return "windsurf"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        lines = [f"# {snapshot.project_name}", ""]
        stack = stack_summary(snapshot, languages=2)
        if stack:
            lines.extend([f"Stack: {stack}", ""])

        for rule in recommendations.rules:
            if rule.priority == "high":
                lines.extend([rule.content, ""])

        if recommendations.agents:
            lines.append("## Roles")
            for agent in recommendations.agents[:MAX_ROLES]:
                lines.append(f"- **{agent.name}**: {agent.description[:ROLE_DESCRIPTION_CHARS]}")

        return [self.artifact(".windsurfrules", lines, "Project rules for Windsurf (Cascade)")]
