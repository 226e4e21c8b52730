"""Conflict analyzer — re-reads agent files and flags routing problems.

Agents are recovered from free-form markdown, so every field of a
``ParsedAgentRecord`` may come back empty. Three checks run over the
recovered records: trigger overlap between pairs, vague descriptions, and
the same agent name described differently in different tools.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from itertools import combinations

from dotti.adapters.contracts import get_contract
from dotti.analysis.frontmatter import parse_frontmatter
from dotti.schemas.config import AnalysisPolicy
from dotti.schemas.issues import ConflictIssue, ConflictReport, ParsedAgentRecord
from dotti.schemas.recommendations import normalize_triggers
from dotti.schemas.tech_stack import ExistingArtifact

logger = logging.getLogger(__name__)

_TRIGGERS_LINE = re.compile(r"^[*_\s-]*triggers?[*_\s]*:[*_\s]*(.+)$", re.IGNORECASE | re.MULTILINE)
_BOLD = re.compile(r"\*\*([^*]+)\*\*")
_SECTION = re.compile(r"^#{2,3}\s+", re.MULTILINE)
_TOP_HEADING = re.compile(r"^#\s+(.+)$", re.MULTILINE)

# Headings in a multi-agent file that are document structure, not agents.
STRUCTURAL_HEADINGS = (
    "project overview",
    "tech stack",
    "stack",
    "rules",
    "conventions",
    "agent roles",
    "roles",
    "patterns",
    "structure",
    "error handling",
    "monorepo",
)

ACTION_VERBS = (
    "review", "write", "create", "build", "test", "fix", "optimize",
    "design", "manage", "audit", "deploy", "generate", "analyze",
    "check", "implement", "refactor", "debug", "document", "maintain",
)


# ------------------------------------------------------------------
# Agent extraction
# ------------------------------------------------------------------


def extract_triggers(text: str) -> list[str]:
    """An explicit ``Triggers:`` line wins; otherwise bold spans are used."""
    match = _TRIGGERS_LINE.search(text)
    if match:
        return normalize_triggers(re.split(r"[,;]", match.group(1).strip(" *_")))
    spans = (m.group(1).strip().lower() for m in _BOLD.finditer(text))
    return normalize_triggers(s for s in spans if 2 < len(s) < 30)


def first_paragraph(body: str) -> str:
    """First line that is not a heading or a list item."""
    for line in body.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith(("#", "-", "*")):
            return stripped
    return ""


def parse_single_agent(artifact: ExistingArtifact, content: str) -> ParsedAgentRecord:
    fm = parse_frontmatter(content)
    heading = _TOP_HEADING.search(fm.body)
    name = fm.fields.get("name") or (heading.group(1).strip() if heading else "") or artifact.relative_path
    return ParsedAgentRecord(
        destination=artifact.destination,
        source_file=artifact.relative_path,
        name=name,
        description=fm.fields.get("description") or first_paragraph(fm.body),
        triggers=extract_triggers(fm.body),
    )


def parse_multi_agent(artifact: ExistingArtifact, content: str) -> list[ParsedAgentRecord]:
    """One record per level-2/3 section that is not a structural heading."""
    records: list[ParsedAgentRecord] = []
    for section in _SECTION.split(content)[1:]:
        heading, _, body = section.partition("\n")
        name = heading.strip()
        if not name or any(s in name.lower() for s in STRUCTURAL_HEADINGS):
            continue
        records.append(ParsedAgentRecord(
            destination=artifact.destination,
            source_file=artifact.relative_path,
            name=name,
            description=first_paragraph(body),
            triggers=extract_triggers(body),
        ))
    return records


def extract_agents(artifacts: Sequence[ExistingArtifact]) -> list[ParsedAgentRecord]:
    """Recover agent records from every agent-bearing artifact, in input order."""
    agents: list[ParsedAgentRecord] = []
    for artifact in artifacts:
        if artifact.raw_content is None:
            continue
        fc = get_contract(artifact.destination).file_contract_for(artifact.relative_path)
        if fc is None or fc.agents == "none":
            continue
        if fc.agents == "multi":
            agents.extend(parse_multi_agent(artifact, artifact.raw_content))
        else:
            agents.append(parse_single_agent(artifact, artifact.raw_content))
    return agents


# ------------------------------------------------------------------
# Detection rules
# ------------------------------------------------------------------


def detect_overlaps(agents: list[ParsedAgentRecord], threshold: float) -> list[ConflictIssue]:
    """One issue per unordered pair whose shared triggers exceed ``threshold`` of the smaller set."""
    issues: list[ConflictIssue] = []
    for a, b in combinations(agents, 2):
        set_a, set_b = set(a.triggers), set(b.triggers)
        if not set_a or not set_b:
            continue
        shared = [t for t in a.triggers if t in set_b]
        if len(shared) / min(len(set_a), len(set_b)) <= threshold:
            continue
        issues.append(ConflictIssue(
            type="overlap",
            destinations=[a.destination, b.destination],
            file_paths=[a.source_file, b.source_file],
            message=f'"{a.name}" and "{b.name}" share {len(shared)} trigger words: {", ".join(shared)}',
            suggested_fix="Differentiate triggers so each agent has a unique activation pattern",
            shared_triggers=shared,
        ))
    return issues


def detect_vague(agents: list[ParsedAgentRecord], min_length: int) -> list[ConflictIssue]:
    issues: list[ConflictIssue] = []
    for agent in agents:
        desc = agent.description
        if len(desc) < min_length:
            issues.append(ConflictIssue(
                type="vague",
                destinations=[agent.destination],
                file_paths=[agent.source_file],
                message=f'"{agent.name}" has a very short description ({len(desc)} chars)',
                suggested_fix=(
                    "Expand to 50+ chars describing what the agent does, "
                    "when to use it and which technologies it covers"
                ),
            ))
            continue
        lowered = desc.lower()
        if not any(verb in lowered for verb in ACTION_VERBS):
            issues.append(ConflictIssue(
                type="vague",
                destinations=[agent.destination],
                file_paths=[agent.source_file],
                message=f'"{agent.name}" description lacks action verbs, which may cause poor routing',
                suggested_fix='Start with a verb: "Review code for...", "Write tests using..."',
            ))
    return issues


def detect_duplicates(agents: list[ParsedAgentRecord]) -> list[ConflictIssue]:
    groups: dict[str, list[ParsedAgentRecord]] = {}
    for agent in agents:
        groups.setdefault(agent.name.lower(), []).append(agent)

    issues: list[ConflictIssue] = []
    for group in groups.values():
        destinations = list(dict.fromkeys(a.destination for a in group))
        if len(destinations) <= 1 or len({a.description for a in group}) <= 1:
            continue
        issues.append(ConflictIssue(
            type="duplicate",
            destinations=destinations,
            file_paths=[a.source_file for a in group],
            message=f'Agent "{group[0].name}" exists in {len(destinations)} tools with different descriptions',
            suggested_fix="Align descriptions across tools for consistent routing, or rename to differentiate",
        ))
    return issues


def analyze_agents(
    artifacts: Sequence[ExistingArtifact], policy: AnalysisPolicy | None = None
) -> ConflictReport:
    """Recover agents from existing artifacts and report routing conflicts."""
    policy = policy or AnalysisPolicy()
    agents = extract_agents(artifacts)
    issues = [
        *detect_overlaps(agents, policy.overlap_threshold),
        *detect_vague(agents, policy.vague_min_length),
        *detect_duplicates(agents),
    ]
    logger.debug("Recovered %d agents, %d conflict issues", len(agents), len(issues))
    return ConflictReport(agents=agents, issues=issues)
