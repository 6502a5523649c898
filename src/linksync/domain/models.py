"""Value types shared by the matcher, the resolvers, and the engine.

All types are frozen dataclasses. A :class:`DocumentMetadata` is an
immutable snapshot handed out by the metadata index at query time.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from linksync.domain.aliases import normalize_aliases

MARKDOWN_EXTENSION = "md"


@dataclass(frozen=True)
class Document:
    """A document in the store, identified by its vault-relative path."""

    path: str

    @property
    def name(self) -> str:
        """Basename including the extension (``folder/note.md`` -> ``note.md``)."""
        return PurePosixPath(self.path).name

    @property
    def basename(self) -> str:
        """Basename without the extension (``folder/note.md`` -> ``note``)."""
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        """Extension without the leading dot, or ``""``."""
        return PurePosixPath(self.path).suffix.lstrip(".")

    @property
    def is_markdown(self) -> bool:
        return self.extension == MARKDOWN_EXTENSION


@dataclass(frozen=True)
class Heading:
    """A parsed heading: its text and nesting level (1-6)."""

    heading: str
    level: int = 1


@dataclass(frozen=True)
class LinkRecord:
    """An outgoing link or embed as cached by the metadata index."""

    link: str  # raw target reference, may include a #anchor
    original: str  # full matched text
    display_text: str | None = None


@dataclass(frozen=True)
class DocumentMetadata:
    """Parsed structure of one document."""

    frontmatter: dict[str, Any] | None = None
    headings: tuple[Heading, ...] = ()
    links: tuple[LinkRecord, ...] = ()
    embeds: tuple[LinkRecord, ...] = ()

    @property
    def aliases(self) -> list[str]:
        """Front-matter aliases as an ordered list (empty if absent)."""
        if not self.frontmatter:
            return []
        return normalize_aliases(self.frontmatter.get("aliases"))

    def frontmatter_value(self, key: str) -> Any:
        if not self.frontmatter:
            return None
        return self.frontmatter.get(key)
