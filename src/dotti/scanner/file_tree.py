"""File-tree facts: languages by extension, significant paths, monorepo layout."""

from __future__ import annotations

from collections import Counter
from pathlib import PurePosixPath

from dotti.schemas.tech_stack import FileTreeFacts, Language
from dotti.shared.codebase_reader import CodebaseReader

LANGUAGE_MAP: dict[str, str] = {
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".py": "Python",
    ".rs": "Rust",
    ".go": "Go",
    ".java": "Java",
    ".kt": "Kotlin",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".swift": "Swift",
    ".dart": "Dart",
    ".vue": "Vue",
    ".svelte": "Svelte",
}

# Directory (or file) under the root -> label recorded in significant_paths
SIGNIFICANT_PATHS: tuple[tuple[str, str], ...] = (
    ("prisma", "Prisma ORM"),
    ("drizzle", "Drizzle ORM"),
    ("playwright", "Playwright tests"),
    ("cypress", "Cypress tests"),
    ("__tests__", "Test directory"),
    ("tests", "Test directory"),
    ("e2e", "E2E tests"),
    (".github/workflows", "GitHub Actions"),
    ("docker", "Docker config"),
    (".docker", "Docker config"),
    ("Dockerfile", "Docker config"),
    ("k8s", "Kubernetes"),
    ("kubernetes", "Kubernetes"),
    ("terraform", "Terraform IaC"),
    ("supabase", "Supabase"),
    ("migrations", "Database migrations"),
    ("alembic", "Database migrations"),
    (".storybook", "Storybook"),
    ("docs", "Documentation"),
    ("packages", "Monorepo packages"),
    ("apps", "Monorepo apps"),
    ("api", "API directory"),
    ("server", "Server directory"),
    ("src/components", "Component directory"),
    ("src/hooks", "Custom hooks"),
    ("src/pages", "Pages (file-based routing)"),
    ("src/app", "App directory (Next.js)"),
)

WORKSPACE_MARKERS = ("pnpm-workspace.yaml", "lerna.json", "turbo.json", "nx.json")
WORKSPACE_DIRS = ("packages", "apps", "libs")


def detect_languages(files: list[str]) -> tuple[Language, ...]:
    """Languages ordered by file count, most files first."""
    counts: Counter[str] = Counter()
    extensions: dict[str, set[str]] = {}
    for f in files:
        ext = PurePosixPath(f).suffix.lower()
        name = LANGUAGE_MAP.get(ext)
        if name is None:
            continue
        counts[name] += 1
        extensions.setdefault(name, set()).add(ext)
    return tuple(
        Language(name=name, file_count=count, extensions=tuple(sorted(extensions[name])))
        for name, count in counts.most_common()
    )


def detect_significant_paths(reader: CodebaseReader) -> tuple[str, ...]:
    labels: dict[str, None] = {}
    for rel, label in SIGNIFICANT_PATHS:
        if (reader.root / rel).exists():
            labels.setdefault(label, None)
    return tuple(labels)


def detect_monorepo(reader: CodebaseReader) -> tuple[bool, tuple[str, ...]]:
    is_monorepo = any((reader.root / marker).is_file() for marker in WORKSPACE_MARKERS)
    packages: list[str] = []
    for parent in WORKSPACE_DIRS:
        base = reader.root / parent
        if not base.is_dir():
            continue
        children = sorted(child.name for child in base.iterdir() if child.is_dir())
        packages.extend(f"{parent}/{name}" for name in children)
        if children:
            is_monorepo = True
    return is_monorepo, tuple(packages)


def scan_file_tree(reader: CodebaseReader) -> tuple[FileTreeFacts, tuple[Language, ...]]:
    files = reader.list_files()
    is_monorepo, packages = detect_monorepo(reader)
    facts = FileTreeFacts(
        total_files=len(files),
        top_level_dirs=tuple(reader.top_level_dirs()),
        has_monorepo=is_monorepo,
        monorepo_packages=packages or None,
        significant_paths=detect_significant_paths(reader),
    )
    return facts, detect_languages(files)
