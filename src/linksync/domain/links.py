"""Link recognition — markdown ``[text](target)`` and ``[[target|text]]`` links.

Pure functions, no infrastructure dependencies. Consumed by the rewrite
engine (occurrence scanning) and by the filesystem metadata index
(link/embed records).

Both scanners run over the same immutable snapshot of a document. Each
returns occurrences with their spans; callers splice replacements in a
single pass afterwards, so text inserted for one syntax is never
re-scanned as the other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import unquote

from linksync.domain.models import LinkRecord

# [display](target): no "]" or newline in display, no ")" or newline in target.
# Never fires directly after "!" (image / embed alt text).
_MARKDOWN_LINK_PATTERN = re.compile(r"(?<!!)\[([^\]\n]+)\]\(([^)\n]+)\)")

# [[path#anchor|display]]: no brackets or newlines in any group.
_WIKILINK_PATTERN = re.compile(
    r"(?<!!)\[\[([^\[\]\n|#]+)(?:#([^\[\]\n|]*))?(?:\|([^\[\]\n]+))?\]\]"
)

# Embeds: ![[target]] and ![alt](target)
_WIKI_EMBED_PATTERN = re.compile(r"!\[\[([^\[\]\n]+)\]\]")
_MARKDOWN_EMBED_PATTERN = re.compile(r"!\[([^\]\n]*)\]\(([^)\n]+)\)")

_CHECKBOX_PREFIX = re.compile(r"^\s*\[[ xX]\]")
_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_FENCE = re.compile(r"^\s*(```|~~~)")


class LinkKind(StrEnum):
    """The two link syntaxes the engine rewrites."""

    MARKDOWN = "markdown"
    WIKI = "wiki"


@dataclass(frozen=True)
class LinkOccurrence:
    """One link found while scanning a document's text."""

    kind: LinkKind
    start: int
    end: int
    text: str  # full matched text
    target: str  # raw target reference (path only for wikilinks)
    display: str | None = None
    anchor: str | None = None  # wikilinks only: the part after "#"


def is_checkbox_match(text: str) -> bool:
    """True if *text* starts with a task-list marker (``[ ]`` or ``[x]``)."""
    return bool(_CHECKBOX_PREFIX.match(text))


def clean_markdown_target(raw: str) -> str:
    """URL-decode a markdown link target and drop any ``#fragment``.

    Examples:
        >>> clean_markdown_target("My%20Note.md#intro")
        'My Note.md'
        >>> clean_markdown_target("#heading-2")
        ''
    """
    decoded = unquote(raw.strip())
    return decoded.split("#", 1)[0].strip()


def split_wikilink_target(raw: str) -> tuple[str, str | None]:
    """Split ``path#anchor`` into ``(path, anchor)``.

    Examples:
        >>> split_wikilink_target("note2#^quote")
        ('note2', '^quote')
        >>> split_wikilink_target("folder/note2")
        ('folder/note2', None)
    """
    if "#" in raw:
        path, anchor = raw.split("#", 1)
        return path, anchor
    return raw, None


def find_markdown_links(text: str) -> list[LinkOccurrence]:
    """Find rewritable ``[display](target)`` links in *text*.

    Image embeds never match. Matches whose text begins with a checkbox
    marker are dropped.
    """
    results: list[LinkOccurrence] = []
    for match in _MARKDOWN_LINK_PATTERN.finditer(text):
        if is_checkbox_match(match.group(0)):
            continue
        results.append(
            LinkOccurrence(
                kind=LinkKind.MARKDOWN,
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                target=match.group(2),
                display=match.group(1),
            )
        )
    return results


def find_wikilinks(text: str) -> list[LinkOccurrence]:
    """Find ``[[path#anchor|display]]`` links in *text*.

    Returns every syntactic match, anchored or not; the engine decides
    what to leave alone. ``anchor`` is None only when there is no ``#``;
    ``[[note#|x]]`` reports an empty string.
    """
    results: list[LinkOccurrence] = []
    for match in _WIKILINK_PATTERN.finditer(text):
        results.append(
            LinkOccurrence(
                kind=LinkKind.WIKI,
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                target=match.group(1),
                display=match.group(3),
                anchor=match.group(2),
            )
        )
    return results


def render_wikilink(path: str, display: str | None, anchor: str | None = None) -> str:
    """Render a wikilink; ``display=None`` renders a bare ``[[path]]``."""
    target = f"{path}#{anchor}" if anchor is not None else path
    if display is None:
        return f"[[{target}]]"
    return f"[[{target}|{display}]]"


def wikilink_stem(path: str) -> str:
    """Last segment of a wikilink path with a ``.md`` extension removed.

    Examples:
        >>> wikilink_stem("folder/note2")
        'note2'
        >>> wikilink_stem("dogs.md")
        'dogs'
    """
    name = path.rsplit("/", 1)[-1]
    if name.lower().endswith(".md"):
        name = name[:-3]
    return name


def render_markdown_link(display: str, target: str) -> str:
    return f"[{display}]({target})"


# ---------------------------------------------------------------------------
# Code fences, link / embed records (metadata index)
# ---------------------------------------------------------------------------


def mask_code_fences(text: str) -> str:
    """Blank out fenced code blocks so no link inside them is seen.

    Fence lines and everything between them become spaces, so offsets
    into the result are offsets into *text*.

    Examples:
        >>> mask_code_fences("a\\n```\\n[x](y)\\n```\\nb")
        'a\\n   \\n      \\n   \\nb'
    """
    lines = text.split("\n")
    in_fence = False
    for i, line in enumerate(lines):
        if _FENCE.match(line):
            in_fence = not in_fence
            lines[i] = " " * len(line)
        elif in_fence:
            lines[i] = " " * len(line)
    return "\n".join(lines)


def extract_link_records(body: str) -> tuple[list[LinkRecord], list[LinkRecord]]:
    """Extract ``(links, embeds)`` records from a document body.

    Wikilink records keep their ``#anchor`` in ``link``. Markdown link
    targets are URL-decoded; external URLs are not recorded.
    """
    scan = mask_code_fences(body)
    found: list[tuple[int, LinkRecord]] = []

    for match in _WIKILINK_PATTERN.finditer(scan):
        path, anchor, display = match.group(1), match.group(2), match.group(3)
        link = f"{path}#{anchor}" if anchor is not None else path
        found.append(
            (match.start(), LinkRecord(link=link, original=match.group(0), display_text=display))
        )

    for match in _MARKDOWN_LINK_PATTERN.finditer(scan):
        target = match.group(2).strip()
        if _URL_SCHEME.match(target):
            continue
        found.append(
            (
                match.start(),
                LinkRecord(
                    link=unquote(target),
                    original=match.group(0),
                    display_text=match.group(1),
                ),
            )
        )

    embeds: list[tuple[int, LinkRecord]] = []
    for match in _WIKI_EMBED_PATTERN.finditer(scan):
        target, _, display = match.group(1).partition("|")
        embeds.append(
            (
                match.start(),
                LinkRecord(link=target, original=match.group(0), display_text=display or None),
            )
        )
    for match in _MARKDOWN_EMBED_PATTERN.finditer(scan):
        target = match.group(2).strip()
        if _URL_SCHEME.match(target):
            continue
        embeds.append(
            (
                match.start(),
                LinkRecord(
                    link=unquote(target),
                    original=match.group(0),
                    display_text=match.group(1) or None,
                ),
            )
        )

    found.sort(key=lambda item: item[0])
    embeds.sort(key=lambda item: item[0])
    return [record for _, record in found], [record for _, record in embeds]
