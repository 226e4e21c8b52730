"""Gemini CLI adapter — a single root GEMINI.md with rules and skills."""

from __future__ import annotations

from dotti.adapters.base import BaseAdapter
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot


class GeminiAdapter(BaseAdapter):
    """Destination F: no frontmatter, no size ceiling."""

    @property
    def destination(self) -> Destination:
        return "gemini"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        lines = [f"# {snapshot.project_name}", ""]

        if snapshot.languages or snapshot.frameworks:
            lines.append("## Tech Stack")
            lines.extend(f"- {name}" for name in snapshot.language_names(limit=3))
            lines.extend(f"- {name}" for name in snapshot.framework_names())
            lines.append("")

        for rule in recommendations.rules:
            lines.extend([rule.content, ""])

        if recommendations.agents:
            lines.extend(["## Skills", ""])
            for agent in recommendations.agents:
                lines.append(f"### {agent.name}")
                lines.append(agent.description)
                lines.extend(f"- {cap}" for cap in agent.capabilities)
                lines.append("")

        return [self.artifact("GEMINI.md", lines, "Project context for Gemini CLI")]
