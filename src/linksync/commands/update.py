"""Command: refresh the outgoing links of one document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from linksync.commands._base import LinkCommand

if TYPE_CHECKING:
    from linksync.commands._context import AppContext


@click.command(
    cls=LinkCommand,
    examples="""\
  linksync update notes/today.md
  linksync --vault ~/notes update projects/alpha.md
  linksync --json update today.md""",
)
@click.argument("path")
@click.pass_obj
def update(app: AppContext, path: str) -> None:
    """Rewrite stale link text in PATH to match the linked documents' titles."""
    from linksync.services.sync import SyncService

    app.emit(SyncService(app.vault).update_note(app.vault_path(path)))
