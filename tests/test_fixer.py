"""Tests for agent recovery and conflict detection."""

from dotti.adapters.registry import serialize_all
from dotti.analysis.fixer import analyze_agents, extract_agents, extract_triggers, parse_multi_agent
from dotti.recommender.engine import recommend
from dotti.schemas.config import AnalysisPolicy
from dotti.schemas.tech_stack import ExistingArtifact, TechStackSnapshot

GOOD_DESC = "Review pull requests for correctness, style and missing tests"


def _agent_file(make_artifact, slug: str, name: str, description: str, triggers: str):
    content = f"---\nname: {name}\ndescription: {description}\n---\n\n# {name}\n\nTriggers: {triggers}\n"
    return make_artifact("claude", f".claude/agents/{slug}.md", content)


class TestExtraction:

    def test_triggers_line(self) -> None:
        assert extract_triggers("Intro\n**Triggers:** Review, PR, review\n") == ["review", "pr"]

    def test_bold_fallback(self) -> None:
        assert extract_triggers("Use for **database** and **schema** work. **x**") == ["database", "schema"]

    def test_single_agent_from_frontmatter(self, make_artifact) -> None:
        artifact = _agent_file(make_artifact, "rev", "Reviewer", GOOD_DESC, "review, pr")
        [agent] = extract_agents([artifact])
        assert agent.name == "Reviewer"
        assert agent.description == GOOD_DESC
        assert agent.triggers == ["review", "pr"]
        assert agent.source_file == ".claude/agents/rev.md"

    def test_single_agent_falls_back_to_heading(self, make_artifact) -> None:
        artifact = make_artifact("copilot", ".github/agents/x.agent.md", "# Helper\n\nFix flaky builds quickly.")
        [agent] = extract_agents([artifact])
        assert agent.name == "Helper"
        assert agent.description == "Fix flaky builds quickly."

    def test_multi_agent_skips_structural_headings(self, make_artifact) -> None:
        content = (
            "# repo\n\n## Tech Stack\n- Go\n\n## Agent Roles\n\n"
            "### Reviewer\nReview code.\n\nTriggers: review\n\n"
            "### Tester\nWrite tests.\n\nTriggers: test\n"
        )
        artifact = make_artifact("codex", "AGENTS.md", content)
        agents = parse_multi_agent(artifact, content)
        assert [a.name for a in agents] == ["Reviewer", "Tester"]
        assert agents[1].triggers == ["test"]

    def test_non_agent_files_ignored(self, make_artifact) -> None:
        artifacts = [
            make_artifact("claude", "CLAUDE.md", "## Reviewer\nReview code."),
            make_artifact("cursor", ".cursor/rules/a.mdc", "---\nglobs: **/*.ts\n---\n## Reviewer\n"),
            make_artifact("claude", ".claude/agents/big.md", None),
        ]
        assert extract_agents(artifacts) == []


class TestOverlap:

    def test_high_overlap_flagged_once_per_pair(self, make_artifact) -> None:
        artifacts = [
            _agent_file(make_artifact, "a", "Alpha", GOOD_DESC, "review, lint, style, pr, diff"),
            _agent_file(make_artifact, "b", "Beta", GOOD_DESC + " fast", "review, lint, style, pr, merge"),
        ]
        report = analyze_agents(artifacts)
        overlaps = [i for i in report.issues if i.type == "overlap"]
        assert len(overlaps) == 1
        assert overlaps[0].shared_triggers == ["review", "lint", "style", "pr"]
        assert "share 4" in overlaps[0].message
        assert overlaps[0].file_paths == [".claude/agents/a.md", ".claude/agents/b.md"]

    def test_low_overlap_not_flagged(self, make_artifact) -> None:
        artifacts = [
            _agent_file(make_artifact, "a", "Alpha", GOOD_DESC, "review, lint, style, pr, diff"),
            _agent_file(make_artifact, "b", "Beta", GOOD_DESC, "review, deploy, docker, ci, k8s"),
        ]
        assert [i for i in analyze_agents(artifacts).issues if i.type == "overlap"] == []

    def test_threshold_from_policy(self, make_artifact) -> None:
        artifacts = [
            _agent_file(make_artifact, "a", "Alpha", GOOD_DESC, "review, lint"),
            _agent_file(make_artifact, "b", "Beta", GOOD_DESC, "review, deploy"),
        ]
        assert not [i for i in analyze_agents(artifacts).issues if i.type == "overlap"]
        strict = AnalysisPolicy(overlap_threshold=0.4)
        assert [i.type for i in analyze_agents(artifacts, strict).issues] == ["overlap"]


class TestVague:

    def test_short_description(self, make_artifact) -> None:
        artifacts = [_agent_file(make_artifact, "a", "Helper", "Helps out", "help")]
        [issue] = analyze_agents(artifacts).issues
        assert issue.type == "vague"
        assert "very short description (9 chars)" in issue.message

    def test_no_action_verb(self, make_artifact) -> None:
        desc = "An expert on everything related to the frontend stack"
        [issue] = analyze_agents([_agent_file(make_artifact, "a", "Guru", desc, "ui")]).issues
        assert "lacks action verbs" in issue.message

    def test_good_description_passes(self, make_artifact) -> None:
        assert analyze_agents([_agent_file(make_artifact, "a", "Rev", GOOD_DESC, "review")]).issues == []


class TestDuplicates:

    def test_same_name_different_descriptions_across_tools(self, make_artifact) -> None:
        claude = _agent_file(make_artifact, "rev", "Reviewer", GOOD_DESC, "review")
        copilot = make_artifact(
            "copilot", ".github/agents/rev.agent.md",
            "---\nname: reviewer\ndescription: Check code for security problems before merge\n---\n",
        )
        dupes = [i for i in analyze_agents([claude, copilot]).issues if i.type == "duplicate"]
        assert len(dupes) == 1
        assert dupes[0].destinations == ["claude", "copilot"]
        assert "exists in 2 tools" in dupes[0].message

    def test_same_tool_is_not_a_duplicate(self, make_artifact) -> None:
        artifacts = [
            _agent_file(make_artifact, "a", "Reviewer", GOOD_DESC, "review"),
            _agent_file(make_artifact, "b", "Reviewer", GOOD_DESC + " again", "audit"),
        ]
        assert not [i for i in analyze_agents(artifacts).issues if i.type == "duplicate"]

    def test_generated_claude_and_codex_agree(self, web_snapshot: TechStackSnapshot) -> None:
        outputs = serialize_all(["claude", "codex"], web_snapshot, recommend(web_snapshot))
        artifacts = [
            ExistingArtifact(
                destination=a.destination, relative_path=a.relative_path,
                size_bytes=a.size_bytes, raw_content=a.content,
            )
            for o in outputs for a in o.artifacts
        ]
        report = analyze_agents(artifacts)
        assert report.agents
        assert not [i for i in report.issues if i.type == "duplicate"]
