"""Vault — the directory of markdown files the CLI operates on.

The Vault is the single dependency injected into :class:`SyncService`.
It owns the document store and the metadata index built on top of it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from linksync.domain.models import Document
from linksync.infrastructure.filesystem import (
    MARKDOWN_SUFFIX,
    find_markdown_files,
    read_text_file,
    resolve_vault_path,
    to_vault_path,
    write_text_file,
)
from linksync.infrastructure.index import FileMetadataIndex

if TYPE_CHECKING:
    from linksync.config.settings import LinkSyncSettings

logger = logging.getLogger(__name__)


class FileDocumentStore:
    """Document store over a vault directory.

    ``read_text`` and ``write_text`` are coroutines to satisfy the store
    protocol; each call completes its I/O before returning.
    """

    def __init__(self, root: Path, *, ignore: Iterable[str] = ()) -> None:
        self.root = root
        self.ignore = tuple(ignore)

    def list_documents(self) -> list[Document]:
        return [
            Document(to_vault_path(self.root, path))
            for path in find_markdown_files(self.root, ignore=self.ignore)
        ]

    def path_for(self, document: Document) -> Path:
        """Filesystem path of *document* (raises ValueError outside the vault)."""
        return resolve_vault_path(self.root, document.path)

    def get(self, vault_path: str) -> Document | None:
        """Return the markdown document at *vault_path*, if it exists."""
        normalized = vault_path.replace("\\", "/").strip("/")
        if not normalized.endswith(MARKDOWN_SUFFIX):
            return None
        try:
            path = resolve_vault_path(self.root, normalized)
        except ValueError:
            return None
        return Document(normalized) if path.is_file() else None

    async def read_text(self, document: Document) -> str:
        return read_text_file(self.path_for(document))

    async def write_text(self, document: Document, text: str) -> None:
        write_text_file(self.path_for(document), text)
        logger.debug("Wrote %s", document.path)


class Vault:
    """Store + index for one vault root, configured from settings."""

    def __init__(self, settings: LinkSyncSettings) -> None:
        self._settings = settings
        self.store = FileDocumentStore(settings.vault_root, ignore=settings.vault.ignore)
        self.index = FileMetadataIndex(self.store)

    @property
    def root(self) -> Path:
        return self._settings.vault_root

    @property
    def settings(self) -> LinkSyncSettings:
        return self._settings
