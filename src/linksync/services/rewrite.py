"""LinkRewriter — refresh link display text inside one document.

Pipeline per document: SCAN -> RESOLVE -> DECIDE -> SPLICE -> WRITE

- SCAN: markdown links and wikilinks are found on the same snapshot,
  with fenced code blocks masked out.
- RESOLVE: each target goes through the metadata index; unresolved
  targets, non-markdown targets, and targets without metadata are left
  alone.
- DECIDE: exact title wins. Markdown links then get a case-only title
  fix; both syntaxes then try alias matching and fall back to the title.
- SPLICE: all replacements are applied in one pass over the snapshot.
- WRITE: the document is written back only when its text changed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from linksync.domain.aliases import resolve_alias
from linksync.domain.links import (
    LinkOccurrence,
    clean_markdown_target,
    find_markdown_links,
    find_wikilinks,
    mask_code_fences,
    render_markdown_link,
    render_wikilink,
    wikilink_stem,
)
from linksync.domain.titles import resolve_title
from linksync.services.telemetry import trace_span

if TYPE_CHECKING:
    from linksync.config.models import LinkSettings
    from linksync.domain.models import Document, DocumentMetadata
    from linksync.services.contracts import DocumentStore, MetadataIndex

logger = logging.getLogger(__name__)

# (start, end, replacement)
_Edit = tuple[int, int, str]


class LinkRewriter:
    """Rewrites the display text of outgoing links in a document.

    Stateless between calls apart from the injected collaborators and the
    read-only *settings*.
    """

    def __init__(
        self,
        store: DocumentStore,
        index: MetadataIndex,
        settings: LinkSettings,
    ) -> None:
        self._store = store
        self._index = index
        self._settings = settings

    async def update_links_in_note(self, document: Document) -> int:
        """Rewrite stale link text in *document*; return the number changed."""
        with trace_span("update_links_in_note") as span:
            if span is not None:
                span.annotate("path", document.path)

            if self._index.metadata_for(document) is None:
                logger.debug("No metadata for %s, skipping", document.path)
                return 0

            original = await self._store.read_text(document)
            edits = self._collect_edits(original, document)
            if not edits:
                return 0

            updated = _splice(original, edits)
            if updated != original:
                await self._store.write_text(document, updated)
                logger.debug("Wrote %d link update(s) to %s", len(edits), document.path)

            if span is not None:
                span.annotate("count", len(edits))
            return len(edits)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _collect_edits(self, text: str, document: Document) -> list[_Edit]:
        edits: list[_Edit] = []
        scan = mask_code_fences(text)

        for occurrence in find_markdown_links(scan):
            replacement = self._rewrite_markdown(occurrence, document)
            if replacement is not None:
                edits.append((occurrence.start, occurrence.end, replacement))

        claimed = [(start, end) for start, end, _ in edits]
        for occurrence in find_wikilinks(scan):
            if any(occurrence.start < end and start < occurrence.end for start, end in claimed):
                continue
            replacement = self._rewrite_wikilink(occurrence, document)
            if replacement is not None:
                edits.append((occurrence.start, occurrence.end, replacement))

        for _, _, replacement in edits:
            logger.debug("Link in %s rewritten to %r", document.path, replacement)
        return edits

    # ------------------------------------------------------------------
    # Per-syntax decisions
    # ------------------------------------------------------------------

    def _rewrite_markdown(self, occurrence: LinkOccurrence, source: Document) -> str | None:
        target = clean_markdown_target(occurrence.target)
        if not target:
            return None

        resolved = self._resolve(target, source)
        if resolved is None:
            return None
        _, title, metadata = resolved

        display = occurrence.display or ""
        new_display = self._choose_display(display, title, metadata, case_fix=True)
        if new_display is None or new_display == display:
            return None
        return render_markdown_link(new_display, occurrence.target)

    def _rewrite_wikilink(self, occurrence: LinkOccurrence, source: Document) -> str | None:
        if occurrence.anchor is not None:
            return None

        path = occurrence.target
        resolved = self._resolve(path, source)
        if resolved is None:
            return None
        _, title, metadata = resolved

        if occurrence.display is None:
            if title.lower() == wikilink_stem(path).lower():
                return None
            return render_wikilink(path, title)

        display = occurrence.display
        new_display = self._choose_display(display, title, metadata, case_fix=False)
        if new_display is None or new_display == display:
            return None
        if new_display == path and new_display == title:
            return render_wikilink(path, None)
        return render_wikilink(path, new_display)

    def _choose_display(
        self,
        display: str,
        title: str,
        metadata: DocumentMetadata,
        *,
        case_fix: bool,
    ) -> str | None:
        """Return the display text a link should carry, or None to keep it.

        *case_fix* (markdown links only) snaps a case-only mismatch to the
        title before aliases are consulted.
        """
        if display == title:
            return None
        if case_fix and display.lower() == title.lower():
            return title
        if self._settings.use_aliases:
            alias = resolve_alias(display, metadata.aliases, self._settings.similarity_threshold)
            if alias is not None:
                return alias
        return title

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve(self, link: str, source: Document) -> tuple[Document, str, DocumentMetadata] | None:
        """Resolve *link* to ``(document, title, metadata)`` or None."""
        target = self._index.resolve_link_path(link, source.path)
        if target is None or not target.is_markdown:
            return None
        metadata = self._index.metadata_for_path(target.path)
        if metadata is None:
            return None
        return target, self.title_for(target, metadata), metadata

    def title_for(self, document: Document, metadata: DocumentMetadata) -> str:
        """Resolve the display title of *document* under the current settings."""
        settings = self._settings
        return resolve_title(
            metadata,
            document.basename,
            use_frontmatter_title=settings.use_frontmatter_title,
            title_property=settings.frontmatter_title_property,
            use_first_heading=settings.use_first_heading,
        )


def _splice(text: str, edits: list[_Edit]) -> str:
    """Apply non-overlapping ``(start, end, replacement)`` edits to *text*."""
    parts: list[str] = []
    cursor = 0
    for start, end, replacement in sorted(edits):
        parts.append(text[cursor:start])
        parts.append(replacement)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)
