"""Gitignore-aware file traversal for the project being configured."""

from __future__ import annotations

import logging
from pathlib import Path

import pathspec

from dotti.adapters.contracts import destination_for_path
from dotti.analysis.globs import filter_matching
from dotti.schemas.tech_stack import ExistingArtifact

logger = logging.getLogger(__name__)

# Hard-coded exclusions that should never be read
_ALWAYS_IGNORE = {
    ".git",
    "node_modules",
    "__pycache__",
    ".next",
    ".nuxt",
    "dist",
    "build",
    ".cache",
    ".turbo",
    "coverage",
    ".pytest_cache",
    ".mypy_cache",
    ".venv",
    "venv",
}

# Artifacts above this are listed but not read (1 MB)
MAX_ARTIFACT_SIZE = 1_024 * 1_024


class CodebaseReader:
    """Read files from a project root, respecting .gitignore rules.

    Also acts as the glob resolver for the validator and pruner.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise ValueError(f"Project root is not a directory: {self.root}")
        self._spec = self._load_gitignore()
        self._all_files: list[str] | None = None

    def _load_gitignore(self) -> pathspec.GitIgnoreSpec | None:
        gi = self.root / ".gitignore"
        if gi.exists():
            return pathspec.GitIgnoreSpec.from_lines(gi.read_text().splitlines())
        return None

    def _is_always_ignored(self, rel: Path) -> bool:
        return any(part in _ALWAYS_IGNORE for part in rel.parts)

    def _is_ignored(self, rel: Path, *, is_dir: bool = False) -> bool:
        if self._is_always_ignored(rel):
            return True
        # gitignore entries like "generated/" only match paths marked as directories
        path = rel.as_posix() + ("/" if is_dir else "")
        return bool(self._spec and self._spec.match_file(path))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_files(self, *, respect_gitignore: bool = True) -> list[str]:
        """Relative POSIX paths of every file under the root, sorted."""
        if not respect_gitignore:
            if self._all_files is None:
                self._all_files = self._walk(respect_gitignore=False)
            return self._all_files
        return self._walk(respect_gitignore=True)

    def resolve_glob(self, pattern: str) -> list[str]:
        """Files matching a root-anchored activation glob.

        Gitignored files count: an activation glob pointing at a generated
        directory is still alive. Raises ``ValueError`` for an invalid pattern.
        """
        return filter_matching(self.list_files(respect_gitignore=False), pattern)

    def read_artifact(self, relative_path: str) -> ExistingArtifact | None:
        """Load a config file as an ``ExistingArtifact``, or ``None`` if no destination claims it."""
        destination = destination_for_path(relative_path)
        if destination is None:
            return None
        target = self.root / relative_path
        size = target.stat().st_size
        content = None
        if size <= MAX_ARTIFACT_SIZE:
            content = target.read_text(errors="replace")
        else:
            logger.warning("Not reading %s: %d bytes is above the read limit", relative_path, size)
        return ExistingArtifact(
            destination=destination,
            relative_path=relative_path,
            size_bytes=size,
            raw_content=content,
        )

    def discover_artifacts(self) -> list[ExistingArtifact]:
        """Every existing AI-tool config file in the project, in path order."""
        artifacts = []
        for rel in self.list_files(respect_gitignore=False):
            artifact = self.read_artifact(rel)
            if artifact is not None:
                artifacts.append(artifact)
        logger.debug("Discovered %d existing artifacts under %s", len(artifacts), self.root)
        return artifacts

    def read_text(self, subpath: str) -> str | None:
        """Contents of a file relative to the root, or ``None`` if it isn't there."""
        target = self.root / subpath
        if not target.is_file():
            return None
        return target.read_text(errors="replace")

    def top_level_dirs(self) -> list[str]:
        return sorted(
            child.name for child in self.root.iterdir()
            if child.is_dir() and not self._is_ignored(child.relative_to(self.root), is_dir=True)
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _walk(self, *, respect_gitignore: bool) -> list[str]:
        files: list[str] = []
        for path in self.root.rglob("*"):
            if not path.is_file():
                continue
            rel = path.relative_to(self.root)
            ignored = self._is_ignored(rel) if respect_gitignore else self._is_always_ignored(rel)
            if ignored:
                continue
            files.append(rel.as_posix())
        return sorted(files)
