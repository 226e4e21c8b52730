"""Pydantic models for the tech-stack snapshot every downstream stage reads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

# Every AI coding tool dotti can write configs for, in registry order.
Destination = Literal["claude", "cursor", "codex", "copilot", "windsurf", "gemini", "amp"]

ALL_DESTINATIONS: tuple[Destination, ...] = (
    "claude",
    "cursor",
    "codex",
    "copilot",
    "windsurf",
    "gemini",
    "amp",
)

PackageManager = Literal["npm", "yarn", "pnpm", "bun", "pip", "poetry", "uv", "cargo", "unknown"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Language(_Frozen):
    """A language detected by file extension."""

    name: str  # "TypeScript", "Python", "Rust", ...
    file_count: int = 0
    extensions: tuple[str, ...] = ()


class ToolInfo(_Frozen):
    """A framework, build tool, test runner, database, styling or lint tool."""

    name: str
    version: str | None = None
    confidence: int | None = None  # 0-100, set by the package scanner
    kind: str = ""  # testing only: "unit" | "e2e" | "integration" | "component"


class FileTreeFacts(_Frozen):
    """Shape of the project tree."""

    total_files: int = 0
    top_level_dirs: tuple[str, ...] = ()
    has_monorepo: bool = False
    monorepo_packages: tuple[str, ...] | None = None
    significant_paths: tuple[str, ...] = ()  # human labels, e.g. "Database migrations"


class ExistingArtifact(_Frozen):
    """A config file already present in the project.

    ``raw_content`` is ``None`` when the file was too large to read.
    """

    destination: Destination
    relative_path: str  # POSIX separators, relative to the project root
    size_bytes: int = 0
    raw_content: str | None = None


class TechStackSnapshot(_Frozen):
    """Immutable description of a project, produced once by the scanner."""

    project_name: str = "project"
    languages: tuple[Language, ...] = ()
    frameworks: tuple[ToolInfo, ...] = ()
    build_tools: tuple[ToolInfo, ...] = ()
    testing: tuple[ToolInfo, ...] = ()
    databases: tuple[ToolInfo, ...] = ()
    styling: tuple[ToolInfo, ...] = ()
    linting: tuple[ToolInfo, ...] = ()
    deployment: tuple[ToolInfo, ...] = ()
    package_manager: PackageManager = "unknown"
    file_tree: FileTreeFacts = FileTreeFacts()
    existing_artifacts: tuple[ExistingArtifact, ...] = ()

    def has_framework(self, *names: str) -> bool:
        return any(f.name in names for f in self.frameworks)

    def has_language(self, name: str) -> bool:
        return any(lang.name == name for lang in self.languages)

    def framework_names(self) -> list[str]:
        return [f.name for f in self.frameworks]

    def language_names(self, limit: int | None = None) -> list[str]:
        langs = self.languages if limit is None else self.languages[:limit]
        return [lang.name for lang in langs]
