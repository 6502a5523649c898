"""Command: list the documents that reference a document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from linksync.commands._base import LinkCommand

if TYPE_CHECKING:
    from linksync.commands._context import AppContext


@click.command(
    cls=LinkCommand,
    examples="""\
  linksync referrers projects/alpha.md
  linksync -q referrers people/jess.md""",
)
@click.argument("path")
@click.pass_obj
def referrers(app: AppContext, path: str) -> None:
    """List documents whose links or embeds resolve to PATH (read-only)."""
    from linksync.services.sync import SyncService

    app.emit(SyncService(app.vault).referrers(app.vault_path(path)))
