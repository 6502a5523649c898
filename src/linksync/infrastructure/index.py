"""FileMetadataIndex — parsed document structure over a vault directory.

Documents are parsed on demand and cached by file modification time, so
a document rewritten by the engine is re-parsed on its next query.

Link resolution follows the host's rules:

- ``./`` and ``../`` references resolve against the source folder only.
- A leading ``/`` anchors the reference at the vault root.
- Anything else tries the exact vault path, then the source-folder
  relative path, then the shortest document path ending in
  ``/<reference>`` (case-insensitive, same folder preferred).

A reference whose last segment has no extension gets ``.md`` appended.
The document listing behind suffix matching is taken once and reused
until :meth:`FileMetadataIndex.invalidate` is called.
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING

from linksync.domain.content import extract_headings, parse_frontmatter
from linksync.domain.links import extract_link_records
from linksync.domain.models import Document, DocumentMetadata
from linksync.infrastructure.filesystem import MARKDOWN_SUFFIX, read_text_file

if TYPE_CHECKING:
    from linksync.infrastructure.vault import FileDocumentStore

logger = logging.getLogger(__name__)


class FileMetadataIndex:
    """Metadata index backed by a :class:`FileDocumentStore`."""

    def __init__(self, store: FileDocumentStore) -> None:
        self._store = store
        self._cache: dict[str, tuple[int, DocumentMetadata]] = {}
        self._listing: list[tuple[str, Document]] | None = None

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def metadata_for(self, document: Document) -> DocumentMetadata | None:
        return self.metadata_for_path(document.path)

    def metadata_for_path(self, path: str) -> DocumentMetadata | None:
        """Parsed metadata for the markdown document at *path*, or None."""
        if not path.endswith(MARKDOWN_SUFFIX):
            return None
        try:
            file_path = self._store.path_for(Document(path))
            mtime = file_path.stat().st_mtime_ns
        except (ValueError, OSError):
            self._cache.pop(path, None)
            return None

        cached = self._cache.get(path)
        if cached is not None and cached[0] == mtime:
            return cached[1]

        metadata = self._parse(read_text_file(file_path))
        self._cache[path] = (mtime, metadata)
        logger.debug("Indexed %s", path)
        return metadata

    def invalidate(self, path: str | None = None) -> None:
        """Drop the cached entry for *path*, or everything.

        A full invalidation also forgets the document listing used for
        suffix matching; call it when documents may have been added or
        removed since the last query.
        """
        if path is None:
            self._cache.clear()
            self._listing = None
        else:
            self._cache.pop(path, None)

    @staticmethod
    def _parse(text: str) -> DocumentMetadata:
        frontmatter, body = parse_frontmatter(text)
        links, embeds = extract_link_records(body)
        return DocumentMetadata(
            frontmatter=frontmatter or None,
            headings=tuple(extract_headings(body)),
            links=tuple(links),
            embeds=tuple(embeds),
        )

    # ------------------------------------------------------------------
    # Link resolution
    # ------------------------------------------------------------------

    def resolve_link_path(self, link: str, from_path: str) -> Document | None:
        """Resolve a link reference written in *from_path* to a document."""
        ref = link.strip().replace("\\", "/")
        if not ref:
            return None
        if "." not in ref.rsplit("/", 1)[-1]:
            ref = f"{ref}{MARKDOWN_SUFFIX}"

        folder = posixpath.dirname(from_path)

        if ref.startswith("/"):
            return self._existing(ref.lstrip("/"))
        if ref.startswith(("./", "../")):
            return self._existing(posixpath.normpath(posixpath.join(folder, ref)))

        found = self._existing(ref)
        if found is None and folder:
            found = self._existing(posixpath.normpath(posixpath.join(folder, ref)))
        if found is None:
            found = self._suffix_match(ref, folder)
        return found

    def _existing(self, vault_path: str) -> Document | None:
        if not vault_path or vault_path == "." or vault_path.startswith("../"):
            return None
        try:
            file_path = self._store.path_for(Document(vault_path))
        except ValueError:
            return None
        return Document(vault_path) if file_path.is_file() else None

    def _suffix_match(self, ref: str, folder: str) -> Document | None:
        wanted = ref.lower()
        suffix = f"/{wanted}"
        candidates = [
            doc
            for lowered, doc in self._documents()
            if lowered == wanted or lowered.endswith(suffix)
        ]
        if not candidates:
            return None
        candidates.sort(
            key=lambda doc: (posixpath.dirname(doc.path) != folder, len(doc.path), doc.path)
        )
        return candidates[0]

    def _documents(self) -> list[tuple[str, Document]]:
        """``(lower-cased path, document)`` pairs, listed once until invalidated."""
        if self._listing is None:
            self._listing = [(doc.path.lower(), doc) for doc in self._store.list_documents()]
        return self._listing
