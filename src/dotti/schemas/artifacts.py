"""Pydantic models for generated destination artifacts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from dotti.schemas.tech_stack import Destination

SizeUnit = Literal["tokens", "chars", "bytes"]


class DestinationArtifact(BaseModel):
    """One file an adapter wants written, relative to the project root."""

    destination: Destination
    relative_path: str
    content: str
    size_bytes: int = 0
    description: str = ""

    @classmethod
    def build(
        cls,
        destination: Destination,
        relative_path: str,
        content: str,
        description: str = "",
    ) -> "DestinationArtifact":
        return cls(
            destination=destination,
            relative_path=relative_path,
            content=content,
            size_bytes=len(content.encode("utf-8")),
            description=description,
        )


class SerializationWarning(BaseModel):
    """A size-limit problem found while serializing."""

    severity: str  # "warning" | "error"
    file_path: str = ""
    message: str


class SerializationOutput(BaseModel):
    """Everything one adapter produced for one destination."""

    destination: Destination
    artifacts: list[DestinationArtifact] = []
    total_size: int = 0
    size_unit: SizeUnit = "tokens"
    warnings: list[SerializationWarning] = []
