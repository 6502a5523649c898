"""Shared pytest fixtures and test doubles for linksync tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from linksync.config.models import LinkSettings
from linksync.config.settings import LinkSyncSettings
from linksync.domain.content import extract_headings, parse_frontmatter
from linksync.domain.links import extract_link_records
from linksync.domain.models import Document, DocumentMetadata
from linksync.infrastructure.vault import Vault
from linksync.services.telemetry import _current_span, disable_telemetry
from linksync.services.updater import LinkUpdater

_PARSE = object()


# ---------------------------------------------------------------------------
# In-memory host doubles
# ---------------------------------------------------------------------------


class InMemoryStore:
    """DocumentStore over a dict; records every write."""

    def __init__(self) -> None:
        self.texts: dict[str, str] = {}
        self.writes: list[str] = []
        self.fail_reads: set[str] = set()

    def list_documents(self) -> list[Document]:
        return [Document(path) for path in self.texts if path.endswith(".md")]

    async def read_text(self, document: Document) -> str:
        if document.path in self.fail_reads:
            raise OSError(f"cannot read {document.path}")
        return self.texts[document.path]

    async def write_text(self, document: Document, text: str) -> None:
        self.texts[document.path] = text
        self.writes.append(document.path)


class InMemoryIndex:
    """MetadataIndex emulating the host.

    Metadata is parsed from the store's current text unless a fixed
    value was registered. Bare references get ``.md`` appended when they
    contain no ``.``; a reference resolves if the store holds that path.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.fixed: dict[str, DocumentMetadata | None] = {}

    def metadata_for(self, document: Document) -> DocumentMetadata | None:
        return self.metadata_for_path(document.path)

    def metadata_for_path(self, path: str) -> DocumentMetadata | None:
        if path in self.fixed:
            return self.fixed[path]
        text = self._store.texts.get(path)
        if text is None or not path.endswith(".md"):
            return None
        frontmatter, body = parse_frontmatter(text)
        links, embeds = extract_link_records(body)
        return DocumentMetadata(
            frontmatter=frontmatter or None,
            headings=tuple(extract_headings(body)),
            links=tuple(links),
            embeds=tuple(embeds),
        )

    def resolve_link_path(self, link: str, from_path: str) -> Document | None:
        path = link if "." in link else f"{link}.md"
        return Document(path) if path in self._store.texts else None


class FakeVault:
    """Builder for an in-memory store + index pair."""

    def __init__(self) -> None:
        self.store = InMemoryStore()
        self.index = InMemoryIndex(self.store)

    def add(
        self,
        path: str,
        text: str = "",
        *,
        metadata: DocumentMetadata | None | object = _PARSE,
    ) -> Document:
        """Add a document; pass ``metadata=`` to pin (or withhold) its metadata."""
        self.store.texts[path] = text
        if metadata is not _PARSE:
            self.index.fixed[path] = metadata  # type: ignore[assignment]
        return Document(path)

    def text(self, path: str) -> str:
        return self.store.texts[path]

    def updater(self, **overrides: object) -> LinkUpdater:
        return LinkUpdater(self.store, self.index, LinkSettings(**overrides))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_vault() -> FakeVault:
    """Empty in-memory vault; add documents with ``fake_vault.add()``."""
    return FakeVault()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Temporary vault directory with a few linked notes.

    - ``note1.md`` links to note2 in both syntaxes with stale text
    - ``folder/note2.md`` title comes from front matter
    - ``people/jess.md`` has aliases
    """
    (tmp_path / "folder").mkdir()
    (tmp_path / "people").mkdir()
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / "note1.md").write_text(
        "# Note One\n\nSee [old text](folder/note2.md) and [[folder/note2]].\n"
        "Ask [Jess](people/jess.md).\n",
        encoding="utf-8",
    )
    (tmp_path / "folder" / "note2.md").write_text(
        "---\ntitle: Different Title\n---\n# Heading\n",
        encoding="utf-8",
    )
    (tmp_path / "people" / "jess.md").write_text(
        "---\naliases: [Jessica, Jess]\n---\n# Jessica Jones\n",
        encoding="utf-8",
    )
    (tmp_path / ".obsidian" / "workspace.md").write_text("[x](note1.md)\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> Vault:
    """Vault over ``vault_root`` with default settings."""
    monkeypatch.delenv("LINKSYNC_CONFIG", raising=False)
    settings = LinkSyncSettings.from_cli(vault_root=vault_root)
    return Vault(settings)


@pytest.fixture
def _isolated_vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp vault so the CLI picks it up by default."""
    monkeypatch.delenv("LINKSYNC_CONFIG", raising=False)
    monkeypatch.chdir(vault_root)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Telemetry is enabled by ``-v`` CLI runs; never let it leak."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def count_listings(monkeypatch: pytest.MonkeyPatch) -> Callable[[object], list[int]]:
    """Wrap a store's ``list_documents`` so calls are counted.

    Returns a function taking the store and returning a one-element list
    holding the running call count.
    """

    def install(store: object) -> list[int]:
        calls = [0]
        original = store.list_documents  # type: ignore[attr-defined]

        def counting() -> list[Document]:
            calls[0] += 1
            return original()

        monkeypatch.setattr(store, "list_documents", counting)
        return calls

    return install
