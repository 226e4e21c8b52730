"""Amp adapter — AGENTS.md plus a JSON ``.amp/settings.json`` manifest."""

from __future__ import annotations

import json

from dotti.adapters.base import BaseAdapter, stack_summary
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot

AMP_SETTINGS_SCHEMA = "https://ampcode.com/schemas/settings.json"


class AmpAdapter(BaseAdapter):
    """Destination G: the manifest must parse as JSON and carry ``$schema``."""

    @property
    def destination(self) -> Destination:
        return "amp"

    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        return [self._agents_md(snapshot, recommendations), self._settings(snapshot)]

    def _agents_md(self, snapshot: TechStackSnapshot, rec: RecommendationResult) -> DestinationArtifact:
        lines = [f"# {snapshot.project_name}", ""]
        stack = stack_summary(snapshot)
        if stack:
            lines.extend([f"Stack: {stack}", ""])

        for rule in rec.rules:
            lines.extend([rule.content, ""])

        if rec.agents:
            lines.append("## Agent Roles")
            for agent in rec.agents:
                lines.extend([f"### {agent.name}", agent.description, ""])

        return self.artifact("AGENTS.md", lines, "Agent instructions for Amp")

    def _settings(self, snapshot: TechStackSnapshot) -> DestinationArtifact:
        settings = {
            "$schema": AMP_SETTINGS_SCHEMA,
            "project": {
                "name": snapshot.project_name,
                "languages": [name.lower() for name in snapshot.language_names(limit=3)],
            },
        }
        content = json.dumps(settings, indent=2)
        return DestinationArtifact.build("amp", ".amp/settings.json", content, "Amp project settings")
