"""Minimal YAML-style frontmatter parser for agent and rule files.

Agent files are hand-edited and frequently not valid YAML (unquoted colons,
glob lists without quotes), so this reads ``key: value`` lines instead of
handing the block to a YAML parser.
"""

from __future__ import annotations

from pydantic import BaseModel

DELIMITER = "---"


class Frontmatter(BaseModel):
    found: bool = False
    fields: dict[str, str] = {}
    body: str = ""


def parse_frontmatter(content: str) -> Frontmatter:
    """Split ``content`` into frontmatter fields and body.

    The block must start on the first line with ``---`` and end at the next
    ``---`` line. Anything else yields ``found=False`` and the whole text as body.
    """
    lines = content.splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        return Frontmatter(body=content)

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            break
    else:
        return Frontmatter(body=content)

    fields: dict[str, str] = {}
    for line in lines[1:end]:
        colon = line.find(":")
        if colon <= 0:
            continue
        fields[line[:colon].strip()] = line[colon + 1:].strip()

    return Frontmatter(found=True, fields=fields, body="\n".join(lines[end + 1:]))


def strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value
