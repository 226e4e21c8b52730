"""GitHub Copilot adapter — repo-wide instructions, scoped instruction files, agent files."""

from __future__ import annotations

from dotti.adapters.base import BaseAdapter, stack_summary
from dotti.adapters.contracts import UNIVERSAL_PATTERNS
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import AgentRecommendation, RecommendationResult, RuleRecommendation
from dotti.schemas.tech_stack import Destination, TechStackSnapshot

# Copilot surfaces a handful of custom agents; more only dilutes routing.
MAX_AGENT_FILES = 5


class CopilotAdapter(BaseAdapter):
    """Destination D: ``applyTo`` instruction files and ``name``/``description`` agent files."""

    @property
    def destination(self) -> Destination:
        return "copilot"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        files = [self._main_instructions(snapshot, recommendations)]
        for rule in recommendations.rules:
            if rule.applies_to[0] not in UNIVERSAL_PATTERNS:
                files.append(self._instruction_file(rule))
        for agent in recommendations.agents[:MAX_AGENT_FILES]:
            files.append(self._agent_file(agent))
        return files

    def _main_instructions(self, snapshot: TechStackSnapshot, rec: RecommendationResult) -> DestinationArtifact:
        lines = [f"# Copilot Instructions: {snapshot.project_name}", ""]
        stack = stack_summary(snapshot)
        if stack:
            lines.extend([f"This project uses: {stack}", ""])
        for rule in rec.rules:
            if rule.priority == "high":
                lines.extend([rule.content, ""])
        return self.artifact(
            ".github/copilot-instructions.md", lines, "Repo-wide instructions for GitHub Copilot"
        )

    def _instruction_file(self, rule: RuleRecommendation) -> DestinationArtifact:
        lines = [
            "---",
            f'applyTo: "{", ".join(rule.applies_to)}"',
            "---",
            "",
            rule.content,
        ]
        return self.artifact(
            f".github/instructions/{rule.id}.instructions.md", lines, f"{rule.title} instructions for Copilot"
        )

    def _agent_file(self, agent: AgentRecommendation) -> DestinationArtifact:
        lines = [
            "---",
            f"name: {agent.name}",
            f"description: {agent.description}",
            "---",
            "",
            f"# {agent.name}",
            "",
            agent.description,
            "",
            "## Capabilities",
            *(f"- {cap}" for cap in agent.capabilities),
        ]
        return self.artifact(
            f".github/agents/{agent.id}.agent.md", lines, f"{agent.name} agent for GitHub Copilot"
        )
