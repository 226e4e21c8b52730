"""Adapter registry — one serializer per destination, iterated uniformly."""

from __future__ import annotations

from collections.abc import Iterable

from dotti.adapters.amp import AmpAdapter
from dotti.adapters.base import BaseAdapter
from dotti.adapters.claude import ClaudeAdapter
from dotti.adapters.codex import CodexAdapter
from dotti.adapters.contracts import get_contract
from dotti.adapters.copilot import CopilotAdapter
from dotti.adapters.cursor import CursorAdapter
from dotti.adapters.gemini import GeminiAdapter
from dotti.adapters.windsurf import WindsurfAdapter
from dotti.schemas.artifacts import SerializationOutput
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot

ADAPTERS: dict[Destination, BaseAdapter] = {
    adapter.destination: adapter
    for adapter in (
        ClaudeAdapter(),
        CursorAdapter(),
        CodexAdapter(),
        CopilotAdapter(),
        WindsurfAdapter(),
        GeminiAdapter(),
        AmpAdapter(),
    )
}


def get_adapter(destination: str) -> BaseAdapter:
    """Return the adapter for a destination; unknown keys raise ``ValueError``."""
    get_contract(destination)
    return ADAPTERS[destination]  # type: ignore[index]


def serialize(
    destination: str, snapshot: TechStackSnapshot, recommendations: RecommendationResult
) -> SerializationOutput:
    return get_adapter(destination).serialize(snapshot, recommendations)


def serialize_all(
    destinations: Iterable[str], snapshot: TechStackSnapshot, recommendations: RecommendationResult
) -> list[SerializationOutput]:
    return [serialize(d, snapshot, recommendations) for d in destinations]
