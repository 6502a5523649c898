"""Markdown content parsing — front matter and headings.

Pure parsing utilities used by the filesystem metadata index. The
rewrite engine itself never parses front matter; it reads the parsed
snapshot from the index.
"""

from __future__ import annotations

import re
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from linksync.domain.models import Heading

_FRONTMATTER_DELIMITER = "---"
_ATX_HEADING = re.compile(r"^(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
_FENCE = re.compile(r"^\s*(```|~~~)")


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader.

    A new instance per call avoids internal state leaking across parses
    (ruamel.yaml's YAML object is stateful).
    """
    return YAML(typ="safe", pure=True)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Handles both ``\\n`` and ``\\r\\n`` line endings.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        front-matter block is found, or the block is not a YAML mapping,
        returns ``({}, content)``.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    try:
        loaded = _new_yaml().load(yaml_block)
    except YAMLError:
        return {}, content

    if not isinstance(loaded, dict):
        return {}, body
    return {str(key): value for key, value in loaded.items()}, body


def extract_headings(body: str) -> list[Heading]:
    """Extract ATX headings (``# Title``) outside fenced code blocks.

    Closing hashes are dropped: ``## Setup ##`` -> ``Setup``.
    """
    headings: list[Heading] = []
    in_fence = False
    for line in body.split("\n"):
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _ATX_HEADING.match(line)
        if match:
            headings.append(Heading(heading=match.group(2).strip(), level=len(match.group(1))))
    return headings
