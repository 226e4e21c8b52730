"""Base adapter ABC — defines the pattern every destination serializer follows."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from dotti.adapters.contracts import DestinationContract, get_contract
from dotti.schemas.artifacts import DestinationArtifact, SerializationOutput, SerializationWarning
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import Destination, TechStackSnapshot
from dotti.shared.sizing import format_size, measure, truncate_to_limit

logger = logging.getLogger(__name__)


class BaseAdapter(ABC):
    """Abstract base class for all destination adapters.

    Subclasses implement:
    - ``destination`` — the destination key this adapter writes
    - ``build(snapshot, recommendations)`` — assemble the artifacts

    ``serialize`` then applies the destination's size contract, which is
    the only step allowed to rewrite an artifact's content.
    """

    @property
    @abstractmethod
    def destination(self) -> Destination:
        """Destination key, e.g. ``"claude"``."""

    @property
    def contract(self) -> DestinationContract:
        return get_contract(self.destination)

    @property
    def display_name(self) -> str:
        return self.contract.display_name

    @abstractmethod
    def build(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> list[DestinationArtifact]:
        """Assemble this destination's files from the recommendations."""

    def serialize(
        self, snapshot: TechStackSnapshot, recommendations: RecommendationResult
    ) -> SerializationOutput:
        """Build the artifacts and enforce the size contract on them."""
        contract = self.contract
        artifacts, warnings = enforce_size_limit(contract, self.build(snapshot, recommendations))
        total = sum(measure(a.content, contract.size_unit) for a in artifacts)
        logger.debug(
            "%s: %d artifacts, %s total", self.destination, len(artifacts),
            format_size(total, contract.size_unit),
        )
        return SerializationOutput(
            destination=self.destination,
            artifacts=artifacts,
            total_size=total,
            size_unit=contract.size_unit,
            warnings=warnings,
        )

    def artifact(self, relative_path: str, lines: list[str], description: str) -> DestinationArtifact:
        return DestinationArtifact.build(self.destination, relative_path, "\n".join(lines), description)


def enforce_size_limit(
    contract: DestinationContract, artifacts: list[DestinationArtifact]
) -> tuple[list[DestinationArtifact], list[SerializationWarning]]:
    """Apply the contract's over-limit policy.

    Only the ``truncate`` policy changes content, and only for the designated
    file. ``warn`` and ``error`` leave content untouched because those formats
    can be split across several files instead.
    """
    if contract.max_size is None:
        return artifacts, []

    limit = contract.max_size
    unit = contract.size_unit
    result: list[DestinationArtifact] = []
    warnings: list[SerializationWarning] = []

    for artifact in artifacts:
        size = measure(artifact.content, unit)

        if contract.over_limit == "truncate":
            if artifact.relative_path != contract.truncate_path or size <= limit:
                result.append(artifact)
                continue
            content = truncate_to_limit(artifact.content, limit, contract.truncation_marker)
            logger.debug("Truncated %s from %d to %d %s", artifact.relative_path, size, len(content), unit)
            warnings.append(SerializationWarning(
                severity="warning",
                file_path=artifact.relative_path,
                message=(
                    f"Content is {format_size(size, unit)}, exceeding {contract.display_name}'s "
                    f"{format_size(limit, unit)} limit. Truncated to fit; consider using fewer rules."
                ),
            ))
            result.append(artifact.model_copy(
                update={"content": content, "size_bytes": len(content.encode("utf-8"))}
            ))
            continue

        result.append(artifact)
        file_contract = contract.file_contract_for(artifact.relative_path)
        if size <= limit or (file_contract is not None and not file_contract.size_limited):
            continue
        warnings.append(SerializationWarning(
            severity="error" if contract.over_limit == "error" else "warning",
            file_path=artifact.relative_path,
            message=(
                f"{artifact.relative_path} is {format_size(size, unit)}, exceeding "
                f"{contract.display_name}'s {format_size(limit, unit)} limit. {contract.split_hint}"
            ),
        ))

    return result, warnings


def stack_summary(snapshot: TechStackSnapshot, *, languages: int = 3) -> str:
    """Frameworks followed by the top languages, comma-separated."""
    return ", ".join(snapshot.framework_names() + snapshot.language_names(limit=languages))
