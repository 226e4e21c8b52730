"""Size measurement for context budgeting.

Token counts use a fixed ~4 characters per token heuristic, which is close
enough (within ~15%) for deciding whether a config blows a tool's budget.
"""

from __future__ import annotations

import math

from dotti.schemas.artifacts import SizeUnit

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate the token count of a string."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def measure(content: str, unit: SizeUnit) -> int:
    """Measure ``content`` in the given unit."""
    match unit:
        case "tokens":
            return estimate_tokens(content)
        case "chars":
            return len(content)
        case "bytes":
            return len(content.encode("utf-8"))
    raise ValueError(f"Unknown size unit: {unit}")


def truncate_to_limit(content: str, max_chars: int, marker: str) -> str:
    """Cut ``content`` so that it plus ``marker`` is exactly ``max_chars`` long.

    Content already within the limit is returned unchanged, so truncating a
    truncated result is a no-op.
    """
    if len(content) <= max_chars:
        return content
    keep = max(max_chars - len(marker), 0)
    return content[:keep] + marker


def format_size(size: int, unit: SizeUnit) -> str:
    """Human-readable size, e.g. ``1.2k tokens``, ``5.9k chars``, ``3.1KB``."""
    if unit == "bytes":
        return format_bytes(size)
    if size >= 1000:
        return f"{size / 1000:.1f}k {unit}"
    return f"{size} {unit}"


def format_bytes(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f}MB"
    if size >= 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size}B"
