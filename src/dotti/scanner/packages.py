"""Manifest scanner — detects frameworks and tooling from package.json and pyproject.toml."""

from __future__ import annotations

import json
import logging
import re
import tomllib
from typing import Literal

from pydantic import BaseModel, ConfigDict

from dotti.schemas.tech_stack import PackageManager, ToolInfo
from dotti.shared.codebase_reader import CodebaseReader

logger = logging.getLogger(__name__)

ToolKind = Literal["framework", "build", "test", "database", "style", "lint"]

_VERSION_PREFIX = re.compile(r"^[\^~>=<!]+")
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9_.\-]+)\s*(?:\[[^\]]*\])?\s*(.*)$")


class DetectionRule(BaseModel):
    """One tool and the evidence that gives it away."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ToolKind
    npm: tuple[str, ...] = ()  # package.json dependency names
    python: tuple[str, ...] = ()  # pyproject dependency names (normalized)
    files: tuple[str, ...] = ()  # marker files relative to the root
    confidence: int = 90
    test_type: str = ""


DETECTION_RULES: tuple[DetectionRule, ...] = (
    # Frameworks
    DetectionRule(name="React", kind="framework", npm=("react",), confidence=95),
    DetectionRule(name="Next.js", kind="framework", npm=("next",),
                  files=("next.config.js", "next.config.mjs", "next.config.ts"), confidence=95),
    DetectionRule(name="Vue", kind="framework", npm=("vue",), confidence=95),
    DetectionRule(name="Nuxt", kind="framework", npm=("nuxt",), confidence=95),
    DetectionRule(name="Svelte", kind="framework", npm=("svelte",), confidence=95),
    DetectionRule(name="SvelteKit", kind="framework", npm=("@sveltejs/kit",), confidence=95),
    DetectionRule(name="Angular", kind="framework", npm=("@angular/core",), confidence=95),
    DetectionRule(name="Express", kind="framework", npm=("express",)),
    DetectionRule(name="Fastify", kind="framework", npm=("fastify",)),
    DetectionRule(name="Hono", kind="framework", npm=("hono",)),
    DetectionRule(name="Remix", kind="framework", npm=("@remix-run/node", "@remix-run/react"), confidence=95),
    DetectionRule(name="Astro", kind="framework", npm=("astro",), confidence=95),
    DetectionRule(name="FastAPI", kind="framework", python=("fastapi",), confidence=95),
    DetectionRule(name="Django", kind="framework", python=("django",), files=("manage.py",), confidence=95),
    DetectionRule(name="Flask", kind="framework", python=("flask",)),
    # Build tools
    DetectionRule(name="Vite", kind="build", npm=("vite",), files=("vite.config.ts", "vite.config.js")),
    DetectionRule(name="Webpack", kind="build", npm=("webpack",), confidence=85),
    DetectionRule(name="Turbopack", kind="build", files=("turbo.json",), confidence=85),
    DetectionRule(name="esbuild", kind="build", npm=("esbuild",), confidence=85),
    # Testing
    DetectionRule(name="Vitest", kind="test", npm=("vitest",), test_type="unit", confidence=95),
    DetectionRule(name="Jest", kind="test", npm=("jest",), test_type="unit", confidence=95),
    DetectionRule(name="Playwright", kind="test", npm=("@playwright/test", "playwright"),
                  python=("pytest-playwright",), test_type="e2e", confidence=95),
    DetectionRule(name="Cypress", kind="test", npm=("cypress",), test_type="e2e", confidence=95),
    DetectionRule(name="Testing Library", kind="test",
                  npm=("@testing-library/react", "@testing-library/vue"), test_type="component"),
    DetectionRule(name="pytest", kind="test", python=("pytest",), files=("pytest.ini", "conftest.py"),
                  test_type="unit", confidence=95),
    # Databases
    DetectionRule(name="Prisma", kind="database", npm=("prisma", "@prisma/client"),
                  files=("prisma/schema.prisma",), confidence=95),
    DetectionRule(name="Drizzle", kind="database", npm=("drizzle-orm",), confidence=95),
    DetectionRule(name="Mongoose", kind="database", npm=("mongoose",)),
    DetectionRule(name="TypeORM", kind="database", npm=("typeorm",)),
    DetectionRule(name="SQLAlchemy", kind="database", python=("sqlalchemy", "sqlmodel")),
    # Styling
    DetectionRule(name="Tailwind CSS", kind="style", npm=("tailwindcss",),
                  files=("tailwind.config.js", "tailwind.config.ts"), confidence=95),
    DetectionRule(name="styled-components", kind="style", npm=("styled-components",)),
    DetectionRule(name="shadcn/ui", kind="style", files=("components.json",), confidence=85),
    # Linting
    DetectionRule(name="ESLint", kind="lint", npm=("eslint",),
                  files=(".eslintrc.js", ".eslintrc.json", "eslint.config.js", "eslint.config.mjs")),
    DetectionRule(name="Prettier", kind="lint", npm=("prettier",),
                  files=(".prettierrc", ".prettierrc.json", "prettier.config.js")),
    DetectionRule(name="Biome", kind="lint", npm=("@biomejs/biome",), files=("biome.json", "biome.jsonc")),
    DetectionRule(name="Ruff", kind="lint", python=("ruff",), files=("ruff.toml", ".ruff.toml")),
)

# Lockfile -> package manager, first match wins
LOCKFILES: tuple[tuple[str, PackageManager], ...] = (
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
    ("uv.lock", "uv"),
    ("poetry.lock", "poetry"),
    ("Pipfile", "pip"),
    ("requirements.txt", "pip"),
    ("pyproject.toml", "pip"),
    ("Cargo.toml", "cargo"),
)


class ManifestScan(BaseModel):
    project_name: str | None = None
    frameworks: list[ToolInfo] = []
    build_tools: list[ToolInfo] = []
    testing: list[ToolInfo] = []
    databases: list[ToolInfo] = []
    styling: list[ToolInfo] = []
    linting: list[ToolInfo] = []
    package_manager: PackageManager = "unknown"


def clean_version(spec: str) -> str | None:
    """``^1.2.3`` -> ``1.2.3``; an empty spec gives ``None``."""
    cleaned = _VERSION_PREFIX.sub("", spec.split(",")[0].strip())
    return cleaned or None


def _normalize(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()


def read_package_json(reader: CodebaseReader) -> tuple[str | None, dict[str, str]]:
    text = reader.read_text("package.json")
    if text is None:
        return None, {}
    try:
        pkg = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring unparseable package.json: %s", exc)
        return None, {}
    if not isinstance(pkg, dict):
        logger.warning("Ignoring package.json: top level is not an object")
        return None, {}
    deps: dict[str, str] = {}
    for table in ("devDependencies", "dependencies"):
        section = pkg.get(table)
        if isinstance(section, dict):
            deps.update((k, str(v)) for k, v in section.items())
    name = pkg.get("name")
    return (str(name) if name is not None else None), deps


def read_pyproject(reader: CodebaseReader) -> tuple[str | None, dict[str, str]]:
    """Project name and dependencies from PEP 621, dependency groups and Poetry tables."""
    text = reader.read_text("pyproject.toml")
    if text is None:
        return None, {}
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Ignoring unparseable pyproject.toml: %s", exc)
        return None, {}

    project = data.get("project", {})
    requirements: list[str] = list(project.get("dependencies", []))
    for extra in project.get("optional-dependencies", {}).values():
        requirements.extend(extra)
    for group in data.get("dependency-groups", {}).values():
        requirements.extend(r for r in group if isinstance(r, str))

    deps: dict[str, str] = {}
    for req in requirements:
        match = _REQUIREMENT_NAME.match(req)
        if match:
            deps[_normalize(match.group(1))] = match.group(2).split(";")[0]

    poetry = data.get("tool", {}).get("poetry", {})
    for table in (poetry.get("dependencies", {}), poetry.get("group", {}).get("dev", {}).get("dependencies", {})):
        for name, spec in table.items():
            deps[_normalize(name)] = spec if isinstance(spec, str) else str(spec.get("version", ""))

    return project.get("name") or poetry.get("name"), deps


def detect_package_manager(reader: CodebaseReader) -> PackageManager:
    for filename, manager in LOCKFILES:
        if (reader.root / filename).is_file():
            return manager
    return "unknown"


def scan_packages(reader: CodebaseReader) -> ManifestScan:
    """Run every detection rule against the project's manifests."""
    npm_name, npm_deps = read_package_json(reader)
    py_name, py_deps = read_pyproject(reader)
    result = ManifestScan(project_name=npm_name or py_name, package_manager=detect_package_manager(reader))
    buckets: dict[ToolKind, list[ToolInfo]] = {
        "framework": result.frameworks,
        "build": result.build_tools,
        "test": result.testing,
        "database": result.databases,
        "style": result.styling,
        "lint": result.linting,
    }

    for rule in DETECTION_RULES:
        version = next((npm_deps[d] for d in rule.npm if d in npm_deps), None)
        if version is None:
            version = next((py_deps[d] for d in rule.python if d in py_deps), None)
        has_marker = any((reader.root / f).is_file() for f in rule.files)
        if version is None and not has_marker:
            continue
        buckets[rule.kind].append(ToolInfo(
            name=rule.name,
            version=clean_version(version) if version else None,
            confidence=rule.confidence if version is not None else rule.confidence - 10,
            kind=rule.test_type,
        ))
        logger.debug("Detected %s (%s)", rule.name, rule.kind)

    return result
