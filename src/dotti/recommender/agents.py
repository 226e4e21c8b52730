"""Agent template catalog and the agent half of the recommendation engine.

Each template is a pair of pure functions over the snapshot: ``score``
returns a confidence and ``materialize`` returns the routing text. Templates
never look at each other's output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from dotti.schemas.recommendations import (
    AgentCategory,
    AgentRecommendation,
    SkippedAgent,
    TemplateDiagnostic,
)
from dotti.schemas.tech_stack import TechStackSnapshot
from dotti.shared.sizing import estimate_tokens

logger = logging.getLogger(__name__)

# Anything scoring below this is noise and never emitted.
INCLUSION_THRESHOLD = 40

_WEB_FRAMEWORKS = (
    "Express", "Fastify", "Hono", "Next.js", "Nuxt", "Remix", "Astro",
    "FastAPI", "Django", "Flask",
)
_FRONTEND_FRAMEWORKS = (
    "React", "Vue", "Svelte", "Angular", "Next.js", "Nuxt", "SvelteKit", "Remix", "Astro",
)
_COMPONENT_LIBRARIES = ("React", "Vue", "Svelte", "Angular")
_BACKEND_FRAMEWORKS = (
    "Express", "Fastify", "Hono", "Next.js", "Nuxt", "Remix", "FastAPI", "Django", "Flask",
)
_BUNDLED_FRONTENDS = ("React", "Next.js", "Vue", "Nuxt", "Svelte", "SvelteKit")


class AgentDetails(BaseModel):
    """The snapshot-dependent part of an agent recommendation."""

    description: str
    reason: str
    triggers: list[str]
    capabilities: list[str]
    relevant_files: list[str]


class AgentTemplate(BaseModel):
    """A catalog entry: identity plus the two pure functions."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: AgentCategory
    score: Callable[[TechStackSnapshot], int]
    materialize: Callable[[TechStackSnapshot], AgentDetails]


def _language_globs(snap: TechStackSnapshot) -> list[str]:
    globs = [f"**/*{ext}" for lang in snap.languages for ext in lang.extensions]
    return globs or ["**/*"]


# ── Code Reviewer ──────────────────────────────────────────────


def _score_code_reviewer(snap: TechStackSnapshot) -> int:
    return 90


def _code_reviewer(snap: TechStackSnapshot) -> AgentDetails:
    langs = ", ".join(snap.language_names()) or "the project's languages"
    frameworks = ", ".join(snap.framework_names())
    framework_part = f", {frameworks} patterns" if frameworks else ""
    return AgentDetails(
        description=(
            f"Review code for {langs} best practices{framework_part}, and common bugs. "
            "Focus on readability, maintainability, and type safety."
        ),
        reason=f"Core languages: {langs}. Code review catches bugs before they ship.",
        triggers=["review", "check code", "PR review", "code quality", "refactor"],
        capabilities=[
            "Identify anti-patterns and code smells",
            "Suggest performance improvements",
            "Check type safety and error handling",
            "Enforce consistent coding style",
        ],
        relevant_files=_language_globs(snap),
    )


# ── Test Writer ────────────────────────────────────────────────


def _score_test_writer(snap: TechStackSnapshot) -> int:
    if snap.testing:
        return 88
    if snap.frameworks:
        return 70
    return 50


def _test_writer(snap: TechStackSnapshot) -> AgentDetails:
    tools = [t.name for t in snap.testing]
    framework = " + ".join(tools) if tools else "your testing framework"
    return AgentDetails(
        description=(
            f"Write and update tests using {framework}. Generate unit tests, integration tests, "
            "and test fixtures following existing test patterns."
        ),
        reason=f"Testing tools detected: {', '.join(tools) or 'none (recommended for quality)'}",
        triggers=["write test", "add tests", "test coverage", "unit test", "integration test", "fix test"],
        capabilities=[
            f"Generate {'/'.join(tools) or 'unit'} test files",
            "Create test fixtures and mocks",
            "Improve test coverage for uncovered code",
            "Fix failing tests",
        ],
        relevant_files=["**/*.test.*", "**/*.spec.*", "**/__tests__/**", "**/tests/**", "**/test_*.py"],
    )


# ── Database Expert ────────────────────────────────────────────


def _score_db_expert(snap: TechStackSnapshot) -> int:
    if snap.databases:
        return 85
    if "Database migrations" in snap.file_tree.significant_paths:
        return 80
    return 0


def _db_expert(snap: TechStackSnapshot) -> AgentDetails:
    dbs = [d.name for d in snap.databases] or ["your database tooling"]
    return AgentDetails(
        description=(
            f"Manage database schema, migrations, and queries using {', '.join(dbs)}. "
            "Optimize queries, handle migrations safely, and maintain data integrity."
        ),
        reason=f"Database tools detected: {', '.join(dbs)}",
        triggers=["migration", "schema", "query", "database", "db", "seed", "index"],
        capabilities=[
            f"Create and modify {'/'.join(dbs)} schemas",
            "Generate safe migrations",
            "Optimize slow queries",
            "Create seed data and fixtures",
        ],
        relevant_files=["**/prisma/**", "**/drizzle/**", "**/migrations/**", "**/seeds/**", "**/*.sql"],
    )


# ── Security Auditor ───────────────────────────────────────────


def _score_security_auditor(snap: TechStackSnapshot) -> int:
    return 78 if snap.has_framework(*_WEB_FRAMEWORKS) else 45


def _security_auditor(snap: TechStackSnapshot) -> AgentDetails:
    frameworks = ", ".join(snap.framework_names()) or "the codebase"
    return AgentDetails(
        description=(
            f"Audit code for security vulnerabilities specific to {frameworks}. Check for XSS, CSRF, "
            "injection attacks, auth bypass, insecure dependencies, and exposed secrets."
        ),
        reason=f"Frameworks: {frameworks}. Security review is critical.",
        triggers=["security", "vulnerability", "XSS", "CSRF", "injection", "auth", "CVE", "secrets"],
        capabilities=[
            "Scan for OWASP Top 10 vulnerabilities",
            "Check authentication and authorization flows",
            "Detect hardcoded secrets and API keys",
            "Review dependency security advisories",
        ],
        relevant_files=[*_language_globs(snap), "**/.env*", "**/auth/**", "**/api/**"],
    )


# ── Component Designer ─────────────────────────────────────────


def _score_component_designer(snap: TechStackSnapshot) -> int:
    if not snap.has_framework(*_FRONTEND_FRAMEWORKS):
        return 0
    return 82 if snap.styling else 68


def _component_designer(snap: TechStackSnapshot) -> AgentDetails:
    library = next((f.name for f in snap.frameworks if f.name in _COMPONENT_LIBRARIES), "UI")
    styling = [s.name for s in snap.styling]
    return AgentDetails(
        description=(
            f"Design and build {library} components using {' + '.join(styling) or 'CSS'}. "
            "Create accessible, responsive, and reusable components following project conventions."
        ),
        reason=f"Frontend: {library}, Styling: {', '.join(styling) or 'not detected'}",
        triggers=["component", "UI", "design", "layout", "responsive", "accessible", "style"],
        capabilities=[
            f"Build {library} components",
            f"Style with {'/'.join(styling) or 'CSS'}",
            "Ensure WCAG accessibility compliance",
            "Create responsive layouts",
        ],
        relevant_files=["**/*.tsx", "**/*.jsx", "**/*.vue", "**/*.svelte", "**/*.css"],
    )


# ── API Developer ──────────────────────────────────────────────


def _score_api_developer(snap: TechStackSnapshot) -> int:
    return 80 if snap.has_framework(*_BACKEND_FRAMEWORKS) else 0


def _api_developer(snap: TechStackSnapshot) -> AgentDetails:
    backend = next((f.name for f in snap.frameworks if f.name in _BACKEND_FRAMEWORKS), "your framework")
    return AgentDetails(
        description=(
            f"Build and maintain API endpoints using {backend}. Design RESTful or GraphQL APIs "
            "with proper validation, error handling, and documentation."
        ),
        reason=f"Backend framework: {backend}",
        triggers=["API", "endpoint", "route", "handler", "REST", "GraphQL", "middleware"],
        capabilities=[
            "Design API endpoints with proper HTTP methods",
            "Implement request validation and error handling",
            "Generate API documentation",
            "Create middleware and guards",
        ],
        relevant_files=["**/api/**", "**/routes/**", "**/handlers/**", "**/middleware/**"],
    )


# ── DevOps Helper ──────────────────────────────────────────────


def _score_devops_helper(snap: TechStackSnapshot) -> int:
    return 72 if snap.deployment else 0


def _devops_helper(snap: TechStackSnapshot) -> AgentDetails:
    tools = [d.name for d in snap.deployment]
    return AgentDetails(
        description=(
            f"Manage CI/CD pipelines, Docker configurations, and deployment using {', '.join(tools)}. "
            "Optimize build times, configure environments, and handle infrastructure as code."
        ),
        reason=f"Deployment tools: {', '.join(tools)}",
        triggers=["deploy", "CI/CD", "pipeline", "Docker", "build", "release", "environment"],
        capabilities=[
            f"Configure {'/'.join(tools)} pipelines",
            "Optimize Docker builds",
            "Manage environment variables",
            "Set up deployment workflows",
        ],
        relevant_files=[
            ".github/workflows/**", "**/Dockerfile*", "**/docker-compose*", "**/terraform/**", "**/*.yaml",
        ],
    )


# ── Performance Optimizer ──────────────────────────────────────


def _score_perf_optimizer(snap: TechStackSnapshot) -> int:
    if snap.has_framework(*_BUNDLED_FRONTENDS) and snap.file_tree.total_files > 50:
        return 65
    return 0


def _perf_optimizer(snap: TechStackSnapshot) -> AgentDetails:
    framework = snap.frameworks[0].name if snap.frameworks else "your app"
    return AgentDetails(
        description=(
            f"Optimize performance for {framework}. Analyze bundle size, identify render bottlenecks, "
            "optimize images, and improve Core Web Vitals."
        ),
        reason=f"{framework} app with {snap.file_tree.total_files} files; performance matters at scale.",
        triggers=["performance", "slow", "optimize", "bundle", "lazy load", "cache", "Core Web Vitals"],
        capabilities=[
            "Identify and fix render bottlenecks",
            "Optimize bundle size and code splitting",
            "Improve Core Web Vitals scores",
            "Set up caching strategies",
        ],
        relevant_files=["**/*.tsx", "**/*.jsx", "**/next.config.*", "**/vite.config.*"],
    )


# ── Documentation Writer ───────────────────────────────────────


def _score_docs_writer(snap: TechStackSnapshot) -> int:
    return 55 if snap.file_tree.total_files > 30 else 30


def _docs_writer(snap: TechStackSnapshot) -> AgentDetails:
    return AgentDetails(
        description=(
            "Write and maintain project documentation including README, API docs, guides, and inline "
            "code comments. Follow the project's existing documentation style."
        ),
        reason=f"Project has {snap.file_tree.total_files} files; documentation helps onboarding.",
        triggers=["document", "README", "docs", "comment", "explain", "guide", "API docs"],
        capabilities=[
            "Generate comprehensive README files",
            "Write API documentation",
            "Add docstrings and doc comments to code",
            "Create onboarding guides",
        ],
        relevant_files=["**/*.md", "**/docs/**", "README*"],
    )


AGENT_TEMPLATES: tuple[AgentTemplate, ...] = (
    AgentTemplate(id="code-reviewer", name="Code Reviewer", category="review",
                  score=_score_code_reviewer, materialize=_code_reviewer),
    AgentTemplate(id="test-writer", name="Test Writer", category="testing",
                  score=_score_test_writer, materialize=_test_writer),
    AgentTemplate(id="db-expert", name="Database Expert", category="database",
                  score=_score_db_expert, materialize=_db_expert),
    AgentTemplate(id="security-auditor", name="Security Auditor", category="security",
                  score=_score_security_auditor, materialize=_security_auditor),
    AgentTemplate(id="component-designer", name="Component Designer", category="ui",
                  score=_score_component_designer, materialize=_component_designer),
    AgentTemplate(id="api-developer", name="API Developer", category="api",
                  score=_score_api_developer, materialize=_api_developer),
    AgentTemplate(id="devops-helper", name="DevOps Helper", category="devops",
                  score=_score_devops_helper, materialize=_devops_helper),
    AgentTemplate(id="perf-optimizer", name="Performance Optimizer", category="perf",
                  score=_score_perf_optimizer, materialize=_perf_optimizer),
    AgentTemplate(id="docs-writer", name="Documentation Writer", category="docs",
                  score=_score_docs_writer, materialize=_docs_writer),
)


def recommend_agents(
    snapshot: TechStackSnapshot,
    *,
    templates: tuple[AgentTemplate, ...] = AGENT_TEMPLATES,
    on_event: Callable[[str], None] | None = None,
) -> tuple[list[AgentRecommendation], list[SkippedAgent], list[TemplateDiagnostic]]:
    """Score every template, materialize the ones at or above the floor.

    Returns ``(agents, skipped, diagnostics)``. Agents are ordered by
    descending confidence; ties keep catalog order. A template that raises is
    reported as a diagnostic and left out of this run.
    """
    agents: list[AgentRecommendation] = []
    skipped: list[SkippedAgent] = []
    diagnostics: list[TemplateDiagnostic] = []

    for template in templates:
        stage = "score"
        try:
            confidence = int(template.score(snapshot))
            logger.debug("Agent template %s scored %d", template.id, confidence)
            if confidence < INCLUSION_THRESHOLD:
                skipped.append(SkippedAgent(
                    id=template.id,
                    name=template.name,
                    confidence=confidence,
                    reason=f"confidence {confidence} below threshold {INCLUSION_THRESHOLD}",
                ))
                continue

            stage = "materialize"
            details = template.materialize(snapshot)
            agents.append(AgentRecommendation(
                id=template.id,
                name=template.name,
                category=template.category,
                confidence=confidence,
                estimated_token_cost=estimate_tokens(
                    details.description + " " + " ".join(details.capabilities)
                ),
                **details.model_dump(),
            ))
        except Exception as exc:
            message = f"Agent template {template.id!r} failed during {stage}: {exc}"
            logger.warning(message)
            diagnostics.append(TemplateDiagnostic(template_id=template.id, stage=stage, message=message))
            if on_event:
                on_event(message)

    # sorted() is stable, so equal confidences keep catalog order.
    agents = sorted(agents, key=lambda a: -a.confidence)
    return agents, skipped, diagnostics
