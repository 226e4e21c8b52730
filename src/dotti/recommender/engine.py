"""Recommendation engine — turns a snapshot into agents and rules."""

from __future__ import annotations

import logging
from collections.abc import Callable

from dotti.recommender.agents import recommend_agents
from dotti.recommender.rules import recommend_rules
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import TechStackSnapshot

logger = logging.getLogger(__name__)


def recommend(
    snapshot: TechStackSnapshot,
    *,
    on_event: Callable[[str], None] | None = None,
) -> RecommendationResult:
    """Run every agent and rule template against ``snapshot``.

    The result is deterministic for a given snapshot. Template failures are
    isolated: they land in ``diagnostics`` and are passed to ``on_event``.
    """
    agents, skipped, agent_diagnostics = recommend_agents(snapshot, on_event=on_event)
    rules, rule_diagnostics = recommend_rules(snapshot, on_event=on_event)

    result = RecommendationResult(
        agents=agents,
        rules=rules,
        skipped=skipped,
        diagnostics=agent_diagnostics + rule_diagnostics,
    )
    logger.debug(
        "Recommended %d agents (%d skipped) and %d rules for %s",
        len(result.agents), len(result.skipped), len(result.rules), snapshot.project_name,
    )
    return result
