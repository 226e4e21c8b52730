"""Rule template catalog — project conventions and coding standards.

Rules are binary: a template either applies to the snapshot or it doesn't.
Priority is fixed per template.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from dotti.schemas.recommendations import Priority, RuleRecommendation, TemplateDiagnostic
from dotti.schemas.tech_stack import TechStackSnapshot

logger = logging.getLogger(__name__)

_SERVER_FRAMEWORKS = ("Express", "Fastify", "Hono", "Next.js", "Nuxt", "Remix", "FastAPI", "Django", "Flask")
_NOISE_DIRS = {"node_modules", ".git", "dist", "build", ".next"}


class RuleBody(BaseModel):
    content: str
    applies_to: list[str]


class RuleTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: str
    priority: Priority
    applies: Callable[[TechStackSnapshot], bool]
    materialize: Callable[[TechStackSnapshot], RuleBody]


def _typescript(snap: TechStackSnapshot) -> RuleBody:
    return RuleBody(
        content="\n".join([
            "## TypeScript Conventions",
            "- Use strict TypeScript (`strict: true` in tsconfig)",
            "- Prefer `interface` over `type` for object shapes that may be extended",
            "- Use `unknown` instead of `any` and narrow with type guards",
            "- Always define return types for exported functions",
            "- Use `readonly` for properties that shouldn't be mutated",
            "- Prefer `const` assertions for literal types",
            "- Use discriminated unions for state management",
            "- Never use `@ts-ignore`; use `@ts-expect-error` with an explanation",
        ]),
        applies_to=["**/*.ts", "**/*.tsx"],
    )


def _python(snap: TechStackSnapshot) -> RuleBody:
    lines = [
        "## Python Conventions",
        "- Type-annotate public functions and methods",
        "- Use `pathlib.Path` instead of string paths",
        "- Raise specific exception types; never use a bare `except:`",
        "- Use `logging.getLogger(__name__)` instead of `print` in library code",
        "- Keep modules importable without side effects",
    ]
    if any(t.name == "pytest" for t in snap.testing):
        lines.append("- Share test setup through `conftest.py` fixtures, not helper base classes")
    if snap.has_framework("FastAPI"):
        lines.append("- Declare request and response bodies as pydantic models")
    return RuleBody(content="\n".join(lines), applies_to=["**/*.py"])


def _react(snap: TechStackSnapshot) -> RuleBody:
    lines = [
        "## React Component Patterns",
        "- Use functional components with hooks (no class components)",
        "- Extract custom hooks for reusable stateful logic",
        "- Co-locate component, tests, and styles in the same directory",
        "- Use `React.memo()` only when profiling shows re-render issues",
        "- Prefer composition over prop drilling; use context sparingly",
        "- Name event handlers as `handleAction` (e.g., `handleSubmit`, `handleClick`)",
        "- Keep components under 200 lines and extract sub-components if larger",
    ]
    if snap.has_framework("Next.js"):
        lines.extend([
            "- Use Server Components by default, add 'use client' only when needed",
            "- Prefer server actions for mutations",
            "- Use the Next.js Image component for all images",
            "- Implement loading.tsx and error.tsx for each route segment",
        ])
    return RuleBody(content="\n".join(lines), applies_to=["**/*.tsx", "**/*.jsx"])


def _testing(snap: TechStackSnapshot) -> RuleBody:
    framework = snap.testing[0].name if snap.testing else "the test framework"
    return RuleBody(
        content="\n".join([
            "## Testing Conventions",
            f"- Write tests using {framework}",
            "- Follow the AAA pattern: Arrange, Act, Assert",
            "- Each test should test ONE behavior; keep tests focused",
            "- Use descriptive test names that state the expected behavior",
            "- Mock external services, never hit real APIs in tests",
            "- Aim for >80% coverage on business logic, don't test implementation details",
            "- Keep shared test fixtures in one place",
        ]),
        applies_to=["**/*.test.*", "**/*.spec.*", "**/__tests__/**", "**/test_*.py"],
    )


def _git(snap: TechStackSnapshot) -> RuleBody:
    return RuleBody(
        content="\n".join([
            "## Git Conventions",
            "- Use conventional commits: `feat:`, `fix:`, `chore:`, `docs:`, `refactor:`, `test:`",
            "- Keep commits atomic: one logical change per commit",
            "- Write commit messages that explain why, not just what",
            "- Create feature branches from `main` and never commit directly to `main`",
            "- Keep PRs focused and under 400 lines when possible",
        ]),
        applies_to=["**/*"],
    )


def _error_handling(snap: TechStackSnapshot) -> RuleBody:
    globs = ["**/*.py"] if snap.has_language("Python") and not snap.has_language("TypeScript") else []
    return RuleBody(
        content="\n".join([
            "## Error Handling",
            "- Use typed error classes for different error categories",
            "- Always handle promise rejections and background task failures",
            "- Return meaningful error messages to API consumers",
            "- Log errors with context (request ID, user ID, stack trace)",
            "- Never expose internal errors to users; map them to safe error responses",
            "- Catch errors at API boundaries, not around every function",
        ]),
        applies_to=globs or ["**/*.ts", "**/*.js"],
    )


def _prisma(snap: TechStackSnapshot) -> RuleBody:
    return RuleBody(
        content="\n".join([
            "## Prisma Conventions",
            "- Run `npx prisma generate` after any schema change",
            "- Use `npx prisma migrate dev` for development migrations",
            "- Never edit migration files after they've been applied",
            "- Use `@map` and `@@map` to keep DB column names snake_case",
            "- Define indexes for frequently queried fields",
            "- Use Prisma Client extensions for reusable query logic",
            "- Always use transactions for multi-step mutations",
        ]),
        applies_to=["**/prisma/**", "**/*.prisma"],
    )


def _tailwind(snap: TechStackSnapshot) -> RuleBody:
    lines = [
        "## Tailwind CSS Conventions",
        "- Use Tailwind utility classes; avoid custom CSS unless absolutely necessary",
        "- Extract repeated class combinations into components, not @apply",
        "- Use a `cn()` utility for conditional class merging",
        "- Follow mobile-first responsive design (sm:, md:, lg:)",
        "- Use design tokens via tailwind.config for colors and spacing",
    ]
    if any(s.name == "shadcn/ui" for s in snap.styling):
        lines.extend([
            "- Use shadcn/ui components as the base and customize via variants",
            "- Follow shadcn/ui patterns for new components",
            "- Install new shadcn components with `npx shadcn@latest add <component>`",
        ])
    return RuleBody(content="\n".join(lines), applies_to=["**/*.tsx", "**/*.jsx", "**/*.css"])


def _project_structure(snap: TechStackSnapshot) -> RuleBody:
    tree = snap.file_tree
    dirs = [d for d in tree.top_level_dirs if d not in _NOISE_DIRS]
    lines = [
        "## Project Structure",
        f"Top-level directories: {', '.join(dirs) or '(none)'}",
        "",
        "- Keep related files together (co-location over separation by type)",
        "- Shared utilities go in one `lib/` or `utils/` package",
        "- Business logic goes in service or domain modules",
        f"- This is a {'monorepo' if tree.has_monorepo else 'single-package'} project",
    ]
    if tree.has_monorepo:
        lines.append(f"- Monorepo packages: {', '.join(tree.monorepo_packages or ()) or 'detected'}")
    return RuleBody(content="\n".join(lines), applies_to=["**/*"])


RULE_TEMPLATES: tuple[RuleTemplate, ...] = (
    RuleTemplate(id="typescript-strict", title="TypeScript Strict Mode Conventions",
                 category="language", priority="high",
                 applies=lambda s: s.has_language("TypeScript"), materialize=_typescript),
    RuleTemplate(id="python-conventions", title="Python Conventions",
                 category="language", priority="high",
                 applies=lambda s: s.has_language("Python"), materialize=_python),
    RuleTemplate(id="react-patterns", title="React Component Patterns",
                 category="framework", priority="high",
                 applies=lambda s: s.has_framework("React", "Next.js"), materialize=_react),
    RuleTemplate(id="testing-conventions", title="Testing Conventions",
                 category="testing", priority="high",
                 applies=lambda s: bool(s.testing), materialize=_testing),
    RuleTemplate(id="git-conventions", title="Git & PR Conventions",
                 category="workflow", priority="medium",
                 applies=lambda s: True, materialize=_git),
    RuleTemplate(id="error-handling", title="Error Handling Patterns",
                 category="quality", priority="medium",
                 applies=lambda s: s.has_framework(*_SERVER_FRAMEWORKS), materialize=_error_handling),
    RuleTemplate(id="prisma-conventions", title="Prisma Workflow",
                 category="database", priority="high",
                 applies=lambda s: any(d.name == "Prisma" for d in s.databases), materialize=_prisma),
    RuleTemplate(id="tailwind-conventions", title="Tailwind CSS Patterns",
                 category="styling", priority="medium",
                 applies=lambda s: any(st.name == "Tailwind CSS" for st in s.styling), materialize=_tailwind),
    RuleTemplate(id="project-structure", title="Project Structure",
                 category="architecture", priority="medium",
                 applies=lambda s: s.file_tree.total_files > 20, materialize=_project_structure),
)


def recommend_rules(
    snapshot: TechStackSnapshot,
    *,
    templates: tuple[RuleTemplate, ...] = RULE_TEMPLATES,
    on_event: Callable[[str], None] | None = None,
) -> tuple[list[RuleRecommendation], list[TemplateDiagnostic]]:
    """Return the rules whose predicate holds, in catalog order, plus any diagnostics."""
    rules: list[RuleRecommendation] = []
    diagnostics: list[TemplateDiagnostic] = []

    for template in templates:
        stage = "applies"
        try:
            if not template.applies(snapshot):
                continue
            stage = "materialize"
            body = template.materialize(snapshot)
            rules.append(RuleRecommendation(
                id=template.id,
                title=template.title,
                content=body.content,
                priority=template.priority,
                reason=f"Detected: {template.category}",
                applies_to=body.applies_to,
                category=template.category,
            ))
        except Exception as exc:
            message = f"Rule template {template.id!r} failed during {stage}: {exc}"
            logger.warning(message)
            diagnostics.append(TemplateDiagnostic(template_id=template.id, stage=stage, message=message))
            if on_event:
                on_event(message)

    return rules, diagnostics
