"""SyncService — synchronous, result-returning facade over LinkUpdater.

Pipeline: LOCATE -> RUN -> RESPOND

Each public method drops the index caches (the vault may have changed
since the previous call), locates its document, drives the async engine
to completion with :func:`asyncio.run`, and converts the outcome (or an
I/O failure) into a :class:`ServiceResult`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from linksync.services.base import BaseService
from linksync.services.contracts import (
    BacklinksResultData,
    ReferrersResultData,
    UpdateAllResultData,
    UpdateNoteResultData,
    dump_validated,
)
from linksync.services.result import ServiceError, ServiceResult
from linksync.services.telemetry import traced
from linksync.services.updater import LinkUpdater

if TYPE_CHECKING:
    from linksync.domain.models import Document
    from linksync.infrastructure.vault import Vault

logger = logging.getLogger(__name__)


class SyncService(BaseService):
    """Link maintenance operations over one vault."""

    def __init__(self, vault: Vault) -> None:
        super().__init__(vault)
        self._updater = LinkUpdater(vault.store, vault.index, vault.settings.links)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def update_note(self, path: str) -> ServiceResult:
        """Refresh the outgoing links of the document at *path*."""
        op = "update_note"
        self._vault.index.invalidate()
        document = self._vault.store.get(path)
        if document is None:
            return _not_found(op, path)

        try:
            count = asyncio.run(self._updater.update_links_in_note(document))
        except OSError as exc:
            return _io_error(op, path, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(UpdateNoteResultData, {"path": document.path, "count": count}),
        )

    @traced
    def update_back_links(
        self,
        path: str,
        *,
        old_path: str | None = None,
        notify: bool = False,
    ) -> ServiceResult:
        """Refresh links that reference *old_path* (default: *path*), then *path*.

        A non-markdown *path* is reported as skipped, not as an error.
        """
        op = "update_back_links"
        self._vault.index.invalidate()
        previous = old_path or path
        document = self._vault.store.get(path)
        if document is None:
            if not path.endswith(".md"):
                data = {"path": path, "old_path": previous, "skipped": True}
                return ServiceResult(
                    ok=True, op=op, data=dump_validated(BacklinksResultData, data)
                )
            return _not_found(op, path)

        referrers = self._updater.find_referrers(previous)
        try:
            count = asyncio.run(
                self._updater.update_back_links(
                    document, previous, notify=notify, referrers=referrers
                )
            )
        except OSError as exc:
            return _io_error(op, path, exc)

        data = {
            "path": document.path,
            "old_path": previous,
            "skipped": count is None,
            "count": count,
            "referrers": [doc.path for doc in referrers],
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(BacklinksResultData, data))

    @traced
    def update_all(self) -> ServiceResult:
        """Rescan every document in the vault."""
        op = "update_all"
        self._vault.index.invalidate()
        documents = self._vault.store.list_documents()
        try:
            count = asyncio.run(self._updater.update_all_links())
        except OSError as exc:
            return _io_error(op, str(self._vault.root), exc)

        logger.debug("update_all: %d link(s) across %d document(s)", count, len(documents))
        data = {"count": count, "documents": len(documents)}
        return ServiceResult(ok=True, op=op, data=dump_validated(UpdateAllResultData, data))

    @traced
    def referrers(self, path: str) -> ServiceResult:
        """List the documents whose links or embeds resolve to *path*."""
        op = "referrers"
        self._vault.index.invalidate()
        document = self._vault.store.get(path)
        if document is None:
            return _not_found(op, path)

        items: list[Document] = self._updater.find_referrers(document.path)
        data = {"path": document.path, "count": len(items), "items": [d.path for d in items]}
        return ServiceResult(ok=True, op=op, data=dump_validated(ReferrersResultData, data))


# ---------------------------------------------------------------------------
# Error results
# ---------------------------------------------------------------------------


def _not_found(op: str, path: str) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="NOT_FOUND",
            message=f"No markdown document at: {path}",
            detail={"path": path},
        ),
    )


def _io_error(op: str, path: str, exc: OSError) -> ServiceResult:
    logger.debug("%s failed on %s", op, path, exc_info=True)
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="IO_ERROR",
            message=str(exc),
            detail={"path": path},
        ),
    )
