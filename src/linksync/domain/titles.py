"""Title policy — the single preferred display name of a document.

Precedence (first applicable wins):

1. front-matter title property (non-empty string), when enabled
2. first heading, when enabled
3. filename without extension

Titles are reduced to plain text before use: headings and front matter
may themselves contain links, and inlining those into another link's
display text would nest link syntax.
"""

from __future__ import annotations

import re

from linksync.domain.models import DocumentMetadata

_WIKILINK_MARKUP = re.compile(r"!?\[\[([^\[\]\n|]+)(?:\|([^\[\]\n]*))?\]\]")
_MARKDOWN_MARKUP = re.compile(r"!?\[([^\]\n]*)\]\([^)\n]*\)")


def strip_link_markup(text: str) -> str:
    """Reduce embedded links in *text* to their display text.

    Wikilinks without display text reduce to their target reference.

    Examples:
        >>> strip_link_markup("About [[dogs|Doggos]] and [cats](cats.md)")
        'About Doggos and cats'
        >>> strip_link_markup("See [[folder/note]]")
        'See folder/note'
    """
    text = _WIKILINK_MARKUP.sub(lambda m: m.group(2) or m.group(1), text)
    return _MARKDOWN_MARKUP.sub(lambda m: m.group(1), text)


def resolve_title(
    metadata: DocumentMetadata,
    fallback: str,
    *,
    use_frontmatter_title: bool = True,
    title_property: str = "title",
    use_first_heading: bool = True,
) -> str:
    """Compute the display title for a document.

    Args:
        metadata: Cached metadata of the target document.
        fallback: Filename stem used when no other source applies.
        use_frontmatter_title: Consult the front-matter *title_property*.
        title_property: Front-matter key holding the title.
        use_first_heading: Fall back to the first heading.
    """
    if use_frontmatter_title:
        value = metadata.frontmatter_value(title_property)
        if isinstance(value, str) and value.strip():
            return strip_link_markup(value.strip())

    if use_first_heading and metadata.headings:
        return strip_link_markup(metadata.headings[0].heading.strip())

    return fallback
