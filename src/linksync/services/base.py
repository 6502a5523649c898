"""BaseService — foundation for the service layer.

Every service receives a :class:`Vault` at construction time. The Vault
provides the document store, the metadata index, and the settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from linksync.infrastructure.vault import Vault


class BaseService:
    """Base for service-layer classes.

    Usage::

        class SyncService(BaseService):
            def update_note(self, path: str) -> ServiceResult:
                document = self._vault.store.get(path)
                ...
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault
