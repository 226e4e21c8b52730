"""Tests for the destination adapters, size enforcement and the contract registry."""

import json

import pytest

from dotti.adapters.base import enforce_size_limit
from dotti.adapters.contracts import (
    WINDSURF_TRUNCATION_MARKER,
    destination_for_path,
    get_contract,
)
from dotti.adapters.registry import ADAPTERS, get_adapter, serialize, serialize_all
from dotti.analysis.frontmatter import parse_frontmatter
from dotti.recommender.engine import recommend
from dotti.schemas.artifacts import DestinationArtifact
from dotti.schemas.recommendations import RecommendationResult, RuleRecommendation
from dotti.schemas.tech_stack import ALL_DESTINATIONS, TechStackSnapshot
from dotti.shared.sizing import measure


@pytest.fixture
def web_recs(web_snapshot: TechStackSnapshot) -> RecommendationResult:
    return recommend(web_snapshot)


def _paths(output) -> list[str]:
    return [a.relative_path for a in output.artifacts]


class TestRegistry:

    def test_one_adapter_per_destination(self) -> None:
        assert list(ADAPTERS) == list(ALL_DESTINATIONS)

    def test_unknown_destination(self) -> None:
        with pytest.raises(ValueError, match="Unknown destination"):
            get_adapter("notepad")

    def test_serialize_all_keeps_order(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        outputs = serialize_all(["gemini", "claude"], web_snapshot, web_recs)
        assert [o.destination for o in outputs] == ["gemini", "claude"]

    @pytest.mark.parametrize("destination", ALL_DESTINATIONS)
    def test_total_size_in_contract_unit(
        self, destination: str, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult
    ) -> None:
        output = serialize(destination, web_snapshot, web_recs)
        unit = get_contract(destination).size_unit
        assert output.size_unit == unit
        assert output.total_size == sum(measure(a.content, unit) for a in output.artifacts)
        assert all(a.destination == destination for a in output.artifacts)


class TestDiscovery:

    @pytest.mark.parametrize(("path", "destination"), [
        ("CLAUDE.md", "claude"),
        (".claude/agents/reviewer.md", "claude"),
        (".cursor/rules/ts.mdc", "cursor"),
        (".cursorrules", "cursor"),
        ("AGENTS.md", "codex"),
        ("packages/api/AGENTS.md", "codex"),
        (".github/copilot-instructions.md", "copilot"),
        (".github/instructions/ts.instructions.md", "copilot"),
        (".github/agents/reviewer.agent.md", "copilot"),
        (".windsurfrules", "windsurf"),
        ("GEMINI.md", "gemini"),
        ("docs/GEMINI.md", "gemini"),
        (".amp/settings.json", "amp"),
    ])
    def test_destination_for_path(self, path: str, destination: str) -> None:
        assert destination_for_path(path) == destination

    def test_unclaimed(self) -> None:
        assert destination_for_path("README.md") is None
        assert destination_for_path("src/CLAUDE.md") is None


class TestClaudeAdapter:

    def test_files(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("claude", web_snapshot, web_recs)
        paths = _paths(output)
        assert paths[0] == "CLAUDE.md"
        assert paths[1:] == [f".claude/agents/{a.id}.md" for a in web_recs.agents]

    def test_agent_frontmatter(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        agent_file = serialize("claude", web_snapshot, web_recs).artifacts[1]
        fm = parse_frontmatter(agent_file.content)
        assert fm.found
        assert fm.fields["name"] == web_recs.agents[0].name
        assert fm.fields["description"] == web_recs.agents[0].description
        assert "Triggers: " in fm.body

    def test_claude_md_includes_rules(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        claude_md = serialize("claude", web_snapshot, web_recs).artifacts[0].content
        assert claude_md.startswith("# acme-web")
        assert "## Tech Stack" in claude_md
        assert "## TypeScript Conventions" in claude_md


class TestCursorAdapter:

    def test_mdc_per_rule(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        paths = _paths(serialize("cursor", web_snapshot, web_recs))
        assert [p for p in paths if p.endswith(".mdc")] == [f".cursor/rules/{r.id}.mdc" for r in web_recs.rules]
        assert "AGENTS.md" in paths

    def test_high_priority_always_applies(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("cursor", web_snapshot, web_recs)
        by_path = {a.relative_path: parse_frontmatter(a.content).fields for a in output.artifacts}
        assert by_path[".cursor/rules/typescript-strict.mdc"]["alwaysApply"] == "true"
        assert by_path[".cursor/rules/typescript-strict.mdc"]["globs"] == "**/*.ts, **/*.tsx"
        assert by_path[".cursor/rules/git-conventions.mdc"]["alwaysApply"] == "false"


class TestCodexAdapter:

    def test_single_file(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("codex", web_snapshot, web_recs)
        assert _paths(output) == ["AGENTS.md"]
        content = output.artifacts[0].content
        assert "Package manager: pnpm" in content
        assert "## Agent Roles" in content
        assert output.warnings == []

    def test_oversize_reported_not_truncated(self) -> None:
        contract = get_contract("codex")
        big = DestinationArtifact.build("codex", "AGENTS.md", "x" * 40_000)
        artifacts, warnings = enforce_size_limit(contract, [big])
        assert artifacts[0].content == big.content
        assert len(warnings) == 1
        assert warnings[0].severity == "error"
        assert "nested subdirectory AGENTS.md" in warnings[0].message


class TestCopilotAdapter:

    def test_files(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        paths = _paths(serialize("copilot", web_snapshot, web_recs))
        assert paths[0] == ".github/copilot-instructions.md"
        assert ".github/instructions/typescript-strict.instructions.md" in paths
        # git-conventions applies to every file, so it stays in the main instructions
        assert ".github/instructions/git-conventions.instructions.md" not in paths
        assert len([p for p in paths if p.endswith(".agent.md")]) == 5

    def test_apply_to_quoted(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("copilot", web_snapshot, web_recs)
        ts = next(a for a in output.artifacts if a.relative_path.endswith("typescript-strict.instructions.md"))
        assert parse_frontmatter(ts.content).fields["applyTo"] == '"**/*.ts, **/*.tsx"'

    def test_oversize_is_a_warning_per_file(self) -> None:
        contract = get_contract("copilot")
        big = DestinationArtifact.build("copilot", ".github/copilot-instructions.md", "y" * 30_001)
        small = DestinationArtifact.build("copilot", ".github/agents/a.agent.md", "z" * 100)
        _, warnings = enforce_size_limit(contract, [big, small])
        assert [(w.file_path, w.severity) for w in warnings] == [(".github/copilot-instructions.md", "warning")]


class TestWindsurfAdapter:

    def _huge_recs(self) -> RecommendationResult:
        rules = [
            RuleRecommendation(
                id=f"rule-{i}", title=f"Rule {i}", content="## Rule\n" + "- keep it tidy\n" * 60,
                priority="high", applies_to=["**/*"],
            )
            for i in range(10)
        ]
        return RecommendationResult(rules=rules)

    def test_truncates_to_exact_limit(self, web_snapshot: TechStackSnapshot) -> None:
        output = serialize("windsurf", web_snapshot, self._huge_recs())
        content = output.artifacts[0].content
        assert len(content) == 6000
        assert content.endswith(WINDSURF_TRUNCATION_MARKER)
        assert output.total_size == 6000
        assert any("Truncated to fit" in w.message for w in output.warnings)

    def test_truncation_is_idempotent(self, web_snapshot: TechStackSnapshot) -> None:
        contract = get_contract("windsurf")
        once = serialize("windsurf", web_snapshot, self._huge_recs()).artifacts
        twice, warnings = enforce_size_limit(contract, once)
        assert twice[0].content == once[0].content
        assert warnings == []

    def test_small_output_untouched(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("windsurf", web_snapshot, web_recs)
        content = output.artifacts[0].content
        assert len(content) <= 6000
        assert WINDSURF_TRUNCATION_MARKER not in content
        assert "## Roles" in content
        assert output.warnings == []

    def test_only_high_priority_rules(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        content = serialize("windsurf", web_snapshot, web_recs).artifacts[0].content
        assert "## TypeScript Conventions" in content
        assert "## Git Conventions" not in content


class TestGeminiAndAmp:

    def test_gemini_single_root_file(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("gemini", web_snapshot, web_recs)
        assert _paths(output) == ["GEMINI.md"]
        assert "## Skills" in output.artifacts[0].content

    def test_amp_settings_json(self, web_snapshot: TechStackSnapshot, web_recs: RecommendationResult) -> None:
        output = serialize("amp", web_snapshot, web_recs)
        assert _paths(output) == ["AGENTS.md", ".amp/settings.json"]
        settings = json.loads(output.artifacts[1].content)
        assert settings["$schema"]
        assert settings["project"] == {"name": "acme-web", "languages": ["typescript"]}
