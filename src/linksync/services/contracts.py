"""Collaborator interfaces and typed payload contracts.

The engine consumes two host capabilities, a document store and a
metadata index. Both are structural :class:`~typing.Protocol` types
injected at construction; implementations never inherit from them.

The pydantic models validate :class:`SyncService` payload shapes before
they leave the service layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from linksync.domain.models import Document, DocumentMetadata


class DocumentStore(Protocol):
    """Whole-document text access. Reads and writes may suspend."""

    def list_documents(self) -> Sequence[Document]: ...

    async def read_text(self, document: Document) -> str: ...

    async def write_text(self, document: Document, text: str) -> None: ...


class MetadataIndex(Protocol):
    """Read-only parsed-structure cache with host link resolution."""

    def metadata_for(self, document: Document) -> DocumentMetadata | None: ...

    def metadata_for_path(self, path: str) -> DocumentMetadata | None: ...

    def resolve_link_path(self, link: str, from_path: str) -> Document | None: ...


# ---------------------------------------------------------------------------
# Payload contracts
# ---------------------------------------------------------------------------


T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class UpdateNoteResultData(BaseModel):
    """Payload contract for ``SyncService.update_note``."""

    path: str
    count: int


class BacklinksResultData(BaseModel):
    """Payload contract for ``SyncService.update_back_links``."""

    path: str
    old_path: str
    skipped: bool = False
    count: int | None = None
    referrers: list[str] = Field(default_factory=list)


class UpdateAllResultData(BaseModel):
    """Payload contract for ``SyncService.update_all``."""

    count: int
    documents: int


class ReferrersResultData(BaseModel):
    """Payload contract for ``SyncService.referrers``."""

    path: str
    count: int
    items: list[str]
