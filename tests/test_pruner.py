"""Tests for the prune analyzer."""

import pytest

from dotti.analysis.globs import FileIndex
from dotti.analysis.pruner import find_prune_candidates

PROJECT = FileIndex(["src/index.ts", "src/App.tsx", "package.json"])


class TestFindPruneCandidates:

    @pytest.mark.asyncio
    async def test_empty_content(self, make_artifact) -> None:
        artifact = make_artifact("cursor", ".cursor/rules/empty.mdc", "---\nglobs: **/*.ts\n---\n\n  tbd \n")
        result = await find_prune_candidates([artifact], PROJECT)
        [candidate] = result.candidates
        assert candidate.reason == "empty-content"
        assert candidate.message == "Config has 3 chars of content (effectively empty)"

    @pytest.mark.asyncio
    async def test_dead_globs(self, make_artifact) -> None:
        artifact = make_artifact(
            "cursor", ".cursor/rules/rust.mdc",
            "---\nglobs: **/*.rs\n---\nPrefer Result over panics in library code.\n",
        )
        result = await find_prune_candidates([artifact], PROJECT)
        [candidate] = result.candidates
        assert candidate.reason == "dead-globs"
        assert candidate.message == "All glob patterns match 0 files: **/*.rs"
        assert candidate.size_bytes == artifact.size_bytes

    @pytest.mark.asyncio
    async def test_empty_wins_over_dead_globs(self, make_artifact) -> None:
        artifact = make_artifact("cursor", ".cursor/rules/rust.mdc", "---\nglobs: **/*.rs\n---\n")
        result = await find_prune_candidates([artifact], PROJECT)
        assert [c.reason for c in result.candidates] == ["empty-content"]

    @pytest.mark.asyncio
    async def test_one_live_pattern_keeps_file(self, make_artifact) -> None:
        artifact = make_artifact(
            "copilot", ".github/instructions/mixed.instructions.md",
            '---\napplyTo: "**/*.rs, src/**/*.ts"\n---\nKeep modules small and focused.\n',
        )
        assert (await find_prune_candidates([artifact], PROJECT)).candidates == []

    @pytest.mark.asyncio
    async def test_universal_patterns_never_dead(self, make_artifact) -> None:
        artifact = make_artifact(
            "cursor", ".cursor/rules/all.mdc", "---\nglobs: **/*\n---\nWrite small commits always.\n",
        )
        assert (await find_prune_candidates([artifact], FileIndex([]))).candidates == []

    @pytest.mark.asyncio
    async def test_unreadable_skipped(self, make_artifact) -> None:
        artifact = make_artifact("claude", ".claude/agents/huge.md", None)
        result = await find_prune_candidates([artifact], PROJECT)
        assert result.scanned == 1
        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_recoverable_bytes(self, make_artifact) -> None:
        artifacts = [
            make_artifact("cursor", ".cursor/rules/a.mdc", "---\n---\n"),
            make_artifact("claude", "CLAUDE.md", "# Project\n\nA real description of the codebase."),
            make_artifact("windsurf", ".windsurfrules", ""),
        ]
        result = await find_prune_candidates(artifacts, PROJECT)
        assert [c.file_path for c in result.candidates] == [".cursor/rules/a.mdc", ".windsurfrules"]
        assert result.recoverable_bytes == len("---\n---\n")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pattern", ["*.ts", "src", "app.ts"])
    async def test_unanchored_patterns_are_dead(self, make_artifact, pattern: str) -> None:
        artifact = make_artifact(
            "cursor", ".cursor/rules/ts.mdc", f"---\nglobs: {pattern}\n---\nPrefer named exports everywhere.\n",
        )
        files = FileIndex(["src/app.ts", "src/util.ts", "package.json"])
        [candidate] = (await find_prune_candidates([artifact], files)).candidates
        assert candidate.reason == "dead-globs"
        assert candidate.message == f"All glob patterns match 0 files: {pattern}"
