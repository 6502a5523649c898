"""LinkUpdater — the engine's public surface.

Orchestrates backlink discovery and per-document rewriting. Documents
are processed strictly one after another: each one is read, rewritten,
and written back before the next is touched. A store failure propagates
to the caller; writes already made to earlier documents stay in place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from linksync.services.backlinks import find_referrers
from linksync.services.rewrite import LinkRewriter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linksync.config.models import LinkSettings
    from linksync.domain.models import Document
    from linksync.services.contracts import DocumentStore, MetadataIndex

logger = logging.getLogger(__name__)


class LinkUpdater:
    """Keeps link display text in step with target titles across a store.

    Usage::

        updater = LinkUpdater(store, index, LinkSettings())
        changed = await updater.update_back_links(renamed, old_path)
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
        self._rewriter = LinkRewriter(store, index, settings)

    @property
    def settings(self) -> LinkSettings:
        return self._settings

    async def update_links_in_note(self, document: Document) -> int:
        """Refresh the outgoing links of one document."""
        return await self._rewriter.update_links_in_note(document)

    def find_referrers(
        self,
        target_path: str,
        documents: Sequence[Document] | None = None,
    ) -> list[Document]:
        """Documents whose links or embeds resolve to *target_path*."""
        return find_referrers(target_path, self._store, self._index, documents)

    async def update_back_links(
        self,
        document: Document,
        old_path: str,
        notify: bool = False,
        *,
        referrers: Sequence[Document] | None = None,
    ) -> int | None:
        """Refresh every link pointing at *old_path*, then *document* itself.

        Returns None, without touching anything, when *old_path* is empty
        or *document* is not a markdown document. Otherwise returns the
        total number of links changed (possibly 0). Pass *referrers* when
        they are already known for *old_path*; otherwise they are
        discovered here.
        """
        if not old_path or not document.is_markdown:
            return None

        if referrers is None:
            referrers = self.find_referrers(old_path)

        total = 0
        for referrer in referrers:
            total += await self.update_links_in_note(referrer)
        total += await self.update_links_in_note(document)

        logger.debug("update_back_links(%s): %d link(s) changed", document.path, total)
        if notify and total > 0:
            logger.info("Updated %d link(s) referencing %s", total, document.path)
        return total

    async def update_all_links(self) -> int:
        """Rescan the whole store; return the total number of links changed.

        The store is listed once and that listing serves every referrer
        scan of the rescan.
        """
        documents = list(self._store.list_documents())
        total = 0
        for document in documents:
            referrers = self.find_referrers(document.path, documents)
            count = await self.update_back_links(document, document.path, referrers=referrers)
            total += count or 0
        logger.debug("update_all_links: %d link(s) changed", total)
        return total
