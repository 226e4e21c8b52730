"""Claude Code adapter — CLAUDE.md plus one agent file per recommendation."""

from __future__ import annotations

from dotti.adapters.base import BaseAdapter
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import AgentRecommendation, RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot


class ClaudeAdapter(BaseAdapter):
    """Destination A: per-agent files require ``name`` and ``description`` frontmatter."""

    @property
    def destination(self) -> Destination:
        return "claude"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        files = [self._claude_md(snapshot, recommendations)]
        files.extend(self._agent_file(agent) for agent in recommendations.agents)
        return files

    def _claude_md(self, snapshot: TechStackSnapshot, rec: RecommendationResult) -> DestinationArtifact:
        lines = [f"# {snapshot.project_name}", "", "## Tech Stack"]
        for lang in snapshot.languages[:3]:
            lines.append(f"- **{lang.name}** ({lang.file_count} files)")
        for tool in (*snapshot.frameworks, *snapshot.build_tools):
            lines.append(f"- {tool.name}{f' {tool.version}' if tool.version else ''}")
        for t in snapshot.testing:
            lines.append(f"- {t.name} ({t.kind} testing)" if t.kind else f"- {t.name}")
        for tool in (*snapshot.databases, *snapshot.styling):
            lines.append(f"- {tool.name}")
        lines.append("")

        for rule in rec.rules:
            lines.extend([rule.content, ""])

        tree = snapshot.file_tree
        if tree.has_monorepo:
            lines.append("## Monorepo Structure")
            lines.append(
                f"This is a monorepo with packages: {', '.join(tree.monorepo_packages or ()) or 'multiple'}"
            )
            lines.append("")

        return self.artifact("CLAUDE.md", lines, "Project context and coding conventions for Claude Code")

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
            "",
            "## When to activate",
            f"Triggers: {', '.join(agent.triggers)}",
            "",
        ]
        if agent.relevant_files:
            lines.extend(["## Relevant files", f"Focus on: {', '.join(agent.relevant_files)}"])

        return self.artifact(f".claude/agents/{agent.id}.md", lines, f"{agent.name} agent for Claude Code")
