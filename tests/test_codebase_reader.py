"""Tests for CodebaseReader — file traversal, gitignore support and artifact discovery."""

from pathlib import Path

import pytest

from dotti.shared.codebase_reader import MAX_ARTIFACT_SIZE, CodebaseReader


@pytest.fixture
def sample_codebase(tmp_path: Path) -> Path:
    """Create a small fake codebase for testing."""
    (tmp_path / "package.json").write_text('{"name": "test-app"}')
    (tmp_path / "README.md").write_text("# Test App")

    src = tmp_path / "src"
    src.mkdir()
    (src / "index.ts").write_text("export const hello = 'world';")
    (src / "utils.ts").write_text("export function add(a: number, b: number) { return a + b; }")

    # Create a node_modules dir that should be ignored
    nm = tmp_path / "node_modules"
    nm.mkdir()
    (nm / "lodash.js").write_text("module.exports = {}")

    (tmp_path / ".gitignore").write_text("*.log\ngenerated/\n")
    (tmp_path / "debug.log").write_text("some log")
    gen = tmp_path / "generated"
    gen.mkdir()
    (gen / "client.ts").write_text("// generated")

    (tmp_path / "CLAUDE.md").write_text("# Test App\n")
    agents = tmp_path / ".claude" / "agents"
    agents.mkdir(parents=True)
    (agents / "reviewer.md").write_text("---\nname: Reviewer\n---\n")

    return tmp_path


class TestCodebaseReader:

    def test_init_requires_directory(self, tmp_path: Path) -> None:
        f = tmp_path / "not-a-dir.txt"
        f.write_text("hi")
        with pytest.raises(ValueError, match="not a directory"):
            CodebaseReader(f)

    def test_list_files_respects_gitignore(self, sample_codebase: Path) -> None:
        files = CodebaseReader(sample_codebase).list_files()
        assert "src/index.ts" in files
        assert "package.json" in files
        assert "debug.log" not in files
        assert "generated/client.ts" not in files
        assert not any(f.startswith("node_modules/") for f in files)
        assert files == sorted(files)

    def test_list_files_without_gitignore(self, sample_codebase: Path) -> None:
        files = CodebaseReader(sample_codebase).list_files(respect_gitignore=False)
        assert "generated/client.ts" in files
        # always-ignored directories stay out
        assert not any(f.startswith("node_modules/") for f in files)

    def test_resolve_glob_counts_gitignored_files(self, sample_codebase: Path) -> None:
        reader = CodebaseReader(sample_codebase)
        assert reader.resolve_glob("**/*.ts") == ["generated/client.ts", "src/index.ts", "src/utils.ts"]
        assert reader.resolve_glob("**/*.rs") == []

    def test_resolve_glob_is_anchored_at_root(self, sample_codebase: Path) -> None:
        reader = CodebaseReader(sample_codebase)
        assert reader.resolve_glob("*.ts") == []
        assert reader.resolve_glob("src") == []
        assert reader.resolve_glob("index.ts") == []
        assert reader.resolve_glob("*.json") == ["package.json"]
        with pytest.raises(ValueError):
            reader.resolve_glob("src/[ab")

    def test_read_text(self, sample_codebase: Path) -> None:
        reader = CodebaseReader(sample_codebase)
        assert "test-app" in reader.read_text("package.json")
        assert reader.read_text("missing.json") is None

    def test_top_level_dirs(self, sample_codebase: Path) -> None:
        dirs = CodebaseReader(sample_codebase).top_level_dirs()
        assert "src" in dirs
        assert "node_modules" not in dirs
        assert "generated" not in dirs

    def test_discover_artifacts(self, sample_codebase: Path) -> None:
        artifacts = CodebaseReader(sample_codebase).discover_artifacts()
        assert [(a.destination, a.relative_path) for a in artifacts] == [
            ("claude", ".claude/agents/reviewer.md"),
            ("claude", "CLAUDE.md"),
        ]
        assert artifacts[1].raw_content == "# Test App\n"
        assert artifacts[1].size_bytes == len("# Test App\n")

    def test_read_artifact_unclaimed(self, sample_codebase: Path) -> None:
        assert CodebaseReader(sample_codebase).read_artifact("README.md") is None

    def test_read_artifact_size_limit(self, sample_codebase: Path) -> None:
        (sample_codebase / "AGENTS.md").write_text("a" * MAX_ARTIFACT_SIZE)
        (sample_codebase / "GEMINI.md").write_text("g" * (MAX_ARTIFACT_SIZE + 1))
        reader = CodebaseReader(sample_codebase)
        at_limit = reader.read_artifact("AGENTS.md")
        over = reader.read_artifact("GEMINI.md")
        assert at_limit is not None and at_limit.raw_content is not None
        assert over is not None and over.raw_content is None
        assert over.size_bytes == MAX_ARTIFACT_SIZE + 1
