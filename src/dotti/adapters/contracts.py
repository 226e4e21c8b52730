"""Per-destination structural and size contracts.

Contracts are plain data. Adapters read them to decide how to enforce size
limits on generated files; the validator reads the very same records to check
files somebody wrote by hand. Adding a destination means appending a record
here and an adapter class, never a new branch in the analyzers.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

import pathspec
from pydantic import BaseModel, ConfigDict

from dotti.schemas.artifacts import SizeUnit
from dotti.schemas.tech_stack import ALL_DESTINATIONS, Destination

# Frontmatter fields whose value is a comma-separated list of activation globs.
GLOB_FIELDS: tuple[str, ...] = ("globs", "applyTo")

# Patterns meaning "every file"; they can never be dead.
UNIVERSAL_PATTERNS: frozenset[str] = frozenset({"**/*", "**"})

WINDSURF_TRUNCATION_MARKER = "\n\n<!-- Truncated by dotti to fit 6k char limit -->"


@lru_cache(maxsize=256)
def _compiled(pattern: str) -> pathspec.GitIgnoreSpec:
    return pathspec.GitIgnoreSpec.from_lines([pattern])


def path_matches(relative_path: str, pattern: str) -> bool:
    """True if a POSIX relative path matches a gitignore-style pattern."""
    return _compiled(pattern).match_file(relative_path)


class FileContract(BaseModel):
    """Rules for one category of file inside a destination."""

    model_config = ConfigDict(frozen=True)

    pattern: str  # gitignore-style, matched against the relative path
    label: str  # used in messages, e.g. "Claude agent file"
    kind: Literal["markdown", "json"] = "markdown"
    frontmatter_required: bool = False
    error_keys: tuple[str, ...] = ()  # missing -> error (identity fields)
    warning_keys: tuple[str, ...] = ()  # missing -> warning (descriptive fields)
    # At least one must be set: a non-empty glob key or a flag equal to "true" (warning otherwise).
    activation_keys: tuple[str, ...] = ()
    schema_key: str | None = None  # json only; missing -> warning
    agents: Literal["none", "single", "multi"] = "none"
    size_limited: bool = False
    root_only: bool = False  # a copy below the project root draws a warning
    nested_message: str = ""

    def matches(self, relative_path: str) -> bool:
        return path_matches(relative_path, self.pattern)


class DestinationContract(BaseModel):
    """Everything dotti knows about one destination tool's format."""

    model_config = ConfigDict(frozen=True)

    destination: Destination
    display_name: str
    size_unit: SizeUnit
    max_size: int | None = None
    # What happens when content exceeds max_size:
    #   "truncate" - cut the designated file and warn (chars only)
    #   "warn"     - leave content alone and warn per file
    #   "error"    - leave content alone and emit an error-level warning
    over_limit: Literal["truncate", "warn", "error"] = "warn"
    truncate_path: str = ""
    truncation_marker: str = ""
    split_hint: str = ""
    discovery: tuple[str, ...] = ()
    files: tuple[FileContract, ...] = ()

    def file_contract_for(self, relative_path: str) -> FileContract | None:
        for fc in self.files:
            if fc.matches(relative_path):
                return fc
        return None

    def claims(self, relative_path: str) -> bool:
        return any(path_matches(relative_path, p) for p in self.discovery)


DESTINATION_CONTRACTS: dict[Destination, DestinationContract] = {
    "claude": DestinationContract(
        destination="claude",
        display_name="Claude Code",
        size_unit="tokens",
        discovery=("/CLAUDE.md", ".claude/agents/*.md", ".claude/settings.local.json"),
        files=(
            FileContract(
                pattern=".claude/agents/*.md",
                label="Claude agent file",
                frontmatter_required=True,
                error_keys=("name",),
                warning_keys=("description",),
                agents="single",
            ),
        ),
    ),
    "cursor": DestinationContract(
        destination="cursor",
        display_name="Cursor",
        size_unit="chars",
        discovery=(".cursor/rules/*.mdc", "/.cursorrules"),
        files=(
            FileContract(
                pattern=".cursor/rules/*.mdc",
                label="Cursor .mdc file",
                frontmatter_required=True,
                warning_keys=("description",),
                activation_keys=("globs", "alwaysApply"),
            ),
            FileContract(pattern="/AGENTS.md", label="AGENTS.md", agents="multi"),
        ),
    ),
    "codex": DestinationContract(
        destination="codex",
        display_name="OpenAI Codex",
        size_unit="bytes",
        max_size=32768,
        over_limit="error",
        split_hint="Split content into nested subdirectory AGENTS.md files",
        discovery=("AGENTS.md", "AGENTS.override.md"),
        files=(
            FileContract(
                pattern="AGENTS.md",
                label="AGENTS.md",
                agents="multi",
                size_limited=True,
            ),
            FileContract(
                pattern="AGENTS.override.md",
                label="AGENTS.override.md",
                size_limited=True,
            ),
        ),
    ),
    "copilot": DestinationContract(
        destination="copilot",
        display_name="GitHub Copilot",
        size_unit="chars",
        max_size=30000,
        over_limit="warn",
        split_hint="Reduce content size or split into multiple instruction files",
        discovery=(
            "/.github/copilot-instructions.md",
            "/.github/instructions/*.instructions.md",
            "/.github/agents/*.agent.md",
        ),
        files=(
            FileContract(
                pattern="/.github/instructions/*.instructions.md",
                label="Copilot instruction file",
                frontmatter_required=True,
                warning_keys=("applyTo",),
                size_limited=True,
            ),
            FileContract(
                pattern="/.github/agents/*.agent.md",
                label="Copilot agent file",
                frontmatter_required=True,
                error_keys=("name",),
                warning_keys=("description",),
                agents="single",
                size_limited=True,
            ),
            FileContract(
                pattern="/.github/copilot-instructions.md",
                label="Copilot instructions",
                size_limited=True,
            ),
        ),
    ),
    "windsurf": DestinationContract(
        destination="windsurf",
        display_name="Windsurf",
        size_unit="chars",
        max_size=6000,
        over_limit="truncate",
        truncate_path=".windsurfrules",
        truncation_marker=WINDSURF_TRUNCATION_MARKER,
        split_hint="Reduce content to fit within 6,000 characters",
        discovery=("/.windsurfrules", ".windsurf/rules/*.md"),
        files=(
            FileContract(
                pattern="/.windsurfrules",
                label=".windsurfrules",
                size_limited=True,
            ),
        ),
    ),
    "gemini": DestinationContract(
        destination="gemini",
        display_name="Gemini CLI",
        size_unit="tokens",
        discovery=("GEMINI.md",),
        files=(
            FileContract(
                pattern="GEMINI.md",
                label="GEMINI.md",
                root_only=True,
                nested_message=(
                    "Nested GEMINI.md detected: Gemini CLI loads these hierarchically, "
                    "which may duplicate context"
                ),
            ),
        ),
    ),
    "amp": DestinationContract(
        destination="amp",
        display_name="Amp (Sourcegraph)",
        size_unit="tokens",
        discovery=(".amp/settings.json",),
        files=(
            FileContract(
                pattern=".amp/settings.json",
                label="Amp settings.json",
                kind="json",
                schema_key="$schema",
            ),
            FileContract(pattern="/AGENTS.md", label="AGENTS.md", agents="multi"),
        ),
    ),
}


def get_contract(destination: str) -> DestinationContract:
    """Return the contract for a destination key; unknown keys are a programming error."""
    try:
        return DESTINATION_CONTRACTS[destination]  # type: ignore[index]
    except KeyError:
        raise ValueError(
            f"Unknown destination: {destination!r} (expected one of {', '.join(ALL_DESTINATIONS)})"
        ) from None


def destination_for_path(relative_path: str) -> Destination | None:
    """First destination (registry order) whose discovery patterns claim a path."""
    for destination in ALL_DESTINATIONS:
        if DESTINATION_CONTRACTS[destination].claims(relative_path):
            return destination
    return None
