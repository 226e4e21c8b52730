"""OpenAI Codex adapter — a single consolidated AGENTS.md under a 32 KB budget."""

from __future__ import annotations

from dotti.adapters.base import BaseAdapter, stack_summary
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot


class CodexAdapter(BaseAdapter):
    """Destination C: everything in one file; oversize content is reported, never cut."""

    @property
    def destination(self) -> Destination:
        return "codex"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        lines = [f"# {snapshot.project_name}", ""]

        stack = stack_summary(snapshot)
        if stack:
            lines.extend([f"Stack: {stack}", ""])
        if snapshot.package_manager != "unknown":
            lines.extend([f"Package manager: {snapshot.package_manager}", ""])

        for rule in recommendations.rules:
            lines.extend([rule.content, ""])

        if recommendations.agents:
            lines.extend(["## Agent Roles", ""])
            for agent in recommendations.agents:
                lines.extend([
                    f"### {agent.name}",
                    agent.description,
                    "",
                    f"Triggers: {', '.join(agent.triggers)}",
                    "",
                ])

        return [self.artifact("AGENTS.md", lines, "Agent instructions for OpenAI Codex")]
