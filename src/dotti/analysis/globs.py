"""Activation-glob helpers shared by the validator and the pruner.

Activation globs are file globs anchored at the project root, the way the
tools themselves expand them: ``*.ts`` only matches top-level files, ``**/``
crosses directories and a bare directory name matches nothing.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Protocol

from wcmatch import glob

from dotti.adapters.contracts import GLOB_FIELDS, UNIVERSAL_PATTERNS
from dotti.analysis.frontmatter import strip_quotes

logger = logging.getLogger(__name__)

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")

GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.BRACE | glob.FORCEUNIX


class GlobResolver(Protocol):
    """Anything that can list the project files a pattern matches."""

    def resolve_glob(self, pattern: str) -> list[str]: ...


def check_glob_syntax(pattern: str) -> None:
    """Raise ``ValueError`` if the pattern cannot be parsed as a glob."""
    depth = 0
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            if i + 1 == len(pattern):
                raise ValueError("pattern ends with an escape character")
            i += 2
            continue
        if char == "[":
            start = i + 1
            if pattern[start:start + 1] in ("!", "^"):
                start += 1
            close = pattern.find("]", start + 1)
            if close == -1:
                raise ValueError("unterminated character class")
            i = close + 1
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise ValueError("unmatched '}'")
        i += 1
    if depth:
        raise ValueError("unmatched '{'")


def filter_matching(files: Iterable[str], pattern: str) -> list[str]:
    """The relative POSIX paths in ``files`` that a root-anchored file glob matches."""
    check_glob_syntax(pattern)
    return glob.globfilter(list(files), pattern, flags=GLOB_FLAGS)


class FileIndex:
    """A fixed list of relative paths, used where no project is on disk."""

    def __init__(self, files: Iterable[str]) -> None:
        self.files = sorted(files)

    def resolve_glob(self, pattern: str) -> list[str]:
        return filter_matching(self.files, pattern)


def extract_glob_patterns(fields: Mapping[str, str]) -> list[str]:
    """Comma-separated patterns from every glob-bearing frontmatter field."""
    patterns: list[str] = []
    for key in GLOB_FIELDS:
        raw = fields.get(key, "")
        for part in strip_quotes(raw).split(","):
            part = strip_quotes(part)
            if part:
                patterns.append(part)
    return patterns


def is_universal(pattern: str) -> bool:
    return pattern in UNIVERSAL_PATTERNS


def is_unsafe(pattern: str) -> bool:
    """Patterns that climb out of the project or point at an absolute path."""
    return ".." in pattern or pattern.startswith(("/", "\\")) or bool(_WINDOWS_DRIVE.match(pattern))


def _count(resolver: GlobResolver, pattern: str) -> int | None:
    try:
        check_glob_syntax(pattern)
        return len(resolver.resolve_glob(pattern))
    except ValueError as exc:
        logger.debug("Invalid glob %r: %s", pattern, exc)
        return None


async def count_matches(resolver: GlobResolver, pattern: str) -> int | None:
    """Number of files a pattern matches, or ``None`` if it cannot be compiled."""
    count = await asyncio.to_thread(_count, resolver, pattern)
    logger.debug("Glob %r matched %s files", pattern, count)
    return count


async def count_all(resolver: GlobResolver, patterns: list[str]) -> list[int | None]:
    """``count_matches`` for each pattern, concurrently, in input order."""
    return list(await asyncio.gather(*(count_matches(resolver, p) for p in patterns)))
