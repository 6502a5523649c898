"""Filesystem operations for vault content.

INVARIANT: Files are truth. Documents are identified by their
vault-relative POSIX path; nothing outside the vault root is ever read
or written.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

MARKDOWN_SUFFIX = ".md"


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text_file(path: Path) -> str:
    """Read a file as UTF-8."""
    return path.read_text(encoding="utf-8")


def write_text_file(path: Path, text: str) -> None:
    """Replace the full content of *path* with *text* (UTF-8).

    Newlines are written verbatim, so a rewrite never changes line endings.
    """
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(text)


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def to_vault_path(vault_root: Path, path: Path) -> str:
    """Return *path* relative to *vault_root* as a POSIX string."""
    return path.relative_to(vault_root).as_posix()


def resolve_vault_path(vault_root: Path, vault_path: str) -> Path:
    """Map a vault-relative path to a filesystem path.

    Raises:
        ValueError: If the result escapes the vault root.
    """
    result = vault_root / vault_path
    if not result.resolve().is_relative_to(vault_root.resolve()):
        msg = f"Path escapes vault root: {vault_path}"
        raise ValueError(msg)
    return result


def find_markdown_files(vault_root: Path, *, ignore: Iterable[str] = ()) -> list[Path]:
    """Discover all markdown files under *vault_root*.

    Directories named in *ignore* (e.g. ``.obsidian``, ``.git``) are
    skipped at any depth. Results are sorted for stable enumeration.
    """
    skip = frozenset(ignore)
    results: list[Path] = []
    if not vault_root.is_dir():
        return results
    for path in vault_root.rglob(f"*{MARKDOWN_SUFFIX}"):
        if not path.is_file():
            continue
        rel_parts = path.relative_to(vault_root).parts
        if any(part in skip for part in rel_parts[:-1]):
            continue
        results.append(path)
    return sorted(results)
