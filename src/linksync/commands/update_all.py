"""Command: rescan the whole vault."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from linksync.commands._base import LinkCommand

if TYPE_CHECKING:
    from linksync.commands._context import AppContext


@click.command(
    "update-all",
    cls=LinkCommand,
    examples="""\
  linksync update-all
  linksync --vault ~/notes update-all
  linksync -v update-all""",
)
@click.pass_obj
def update_all(app: AppContext) -> None:
    """Refresh link text in every document of the vault."""
    from linksync.services.sync import SyncService

    app.emit(SyncService(app.vault).update_all())
