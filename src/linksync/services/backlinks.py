"""Backlink discovery — which documents reference a given path.

Read-only scan over the metadata index; no document text is read.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from linksync.domain.links import split_wikilink_target

if TYPE_CHECKING:
    from collections.abc import Iterable

    from linksync.domain.models import Document
    from linksync.services.contracts import DocumentStore, MetadataIndex

logger = logging.getLogger(__name__)


def find_referrers(
    target_path: str,
    store: DocumentStore,
    index: MetadataIndex,
    documents: Iterable[Document] | None = None,
) -> list[Document]:
    """Return the documents whose links or embeds resolve to *target_path*.

    Each referrer appears once, in enumeration order, however many of its
    references match. The target itself is never its own referrer.
    *documents* limits the scan to an already-enumerated batch; by default
    the whole store is listed.
    """
    referrers: list[Document] = []
    seen: set[str] = set()

    if documents is None:
        documents = store.list_documents()

    for document in documents:
        if document.path == target_path or document.path in seen:
            continue
        metadata = index.metadata_for(document)
        if metadata is None:
            continue

        for record in (*metadata.embeds, *metadata.links):
            link, _ = split_wikilink_target(record.link)
            if not link:
                continue
            resolved = index.resolve_link_path(link, document.path)
            if resolved is not None and resolved.path == target_path:
                referrers.append(document)
                seen.add(document.path)
                break

    logger.debug("Found %d referrer(s) of %s", len(referrers), target_path)
    return referrers
