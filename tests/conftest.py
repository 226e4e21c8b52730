"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from dotti.schemas.tech_stack import (
    Destination,
    ExistingArtifact,
    FileTreeFacts,
    Language,
    TechStackSnapshot,
    ToolInfo,
)


def _make_artifact(destination: Destination, relative_path: str, content: str | None) -> ExistingArtifact:
    size = len(content.encode("utf-8")) if content is not None else 2_000_000
    return ExistingArtifact(
        destination=destination, relative_path=relative_path, size_bytes=size, raw_content=content,
    )


@pytest.fixture
def make_artifact() -> Callable[..., ExistingArtifact]:
    """Factory building an ExistingArtifact the way the reader would for some content.

    ``None`` content stands for a file too large to read.
    """
    return _make_artifact


@pytest.fixture
def web_snapshot() -> TechStackSnapshot:
    """A full-stack TypeScript project: React + Express + Prisma + Tailwind + Vitest."""
    return TechStackSnapshot(
        project_name="acme-web",
        languages=(Language(name="TypeScript", file_count=120, extensions=(".ts", ".tsx")),),
        frameworks=(ToolInfo(name="React", version="18.2.0"), ToolInfo(name="Express")),
        build_tools=(ToolInfo(name="Vite"),),
        testing=(ToolInfo(name="Vitest", kind="unit"),),
        databases=(ToolInfo(name="Prisma"),),
        styling=(ToolInfo(name="Tailwind CSS"),),
        deployment=(ToolInfo(name="GitHub Actions"),),
        package_manager="pnpm",
        file_tree=FileTreeFacts(total_files=120, top_level_dirs=("src", "prisma")),
    )


@pytest.fixture
def bare_snapshot() -> TechStackSnapshot:
    """A tiny project with one Go file and no detected tooling."""
    return TechStackSnapshot(
        project_name="tiny",
        languages=(Language(name="Go", file_count=1, extensions=(".go",)),),
        file_tree=FileTreeFacts(total_files=3),
    )


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A small TypeScript project on disk, with one dead and one live Cursor rule."""
    (tmp_path / "package.json").write_text(
        '{"name": "sample-app", "dependencies": {"react": "^18.2.0"}, '
        '"devDependencies": {"vitest": "^1.0.0", "typescript": "^5.0.0"}}'
    )
    (tmp_path / "pnpm-lock.yaml").write_text("lockfileVersion: 9\n")
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.ts").write_text("export const hello = 'world';\n")
    (src / "App.tsx").write_text("export function App() { return null; }\n")

    rules = tmp_path / ".cursor" / "rules"
    rules.mkdir(parents=True)
    (rules / "typescript.mdc").write_text(
        "---\ndescription: TypeScript rules\nglobs: **/*.ts, **/*.tsx\nalwaysApply: false\n---\n\n"
        "Use strict mode everywhere in this project.\n"
    )
    (rules / "rust.mdc").write_text(
        "---\ndescription: Rust rules\nglobs: **/*.rs\nalwaysApply: false\n---\n\n"
        "Prefer Result over panics in library code.\n"
    )
    return tmp_path
