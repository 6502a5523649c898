"""Command: refresh every link that points at a document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from linksync.commands._base import LinkCommand

if TYPE_CHECKING:
    from linksync.commands._context import AppContext


@click.command(
    cls=LinkCommand,
    examples="""\
  linksync backlinks projects/alpha.md
  linksync backlinks projects/alpha.md --old-path drafts/alpha.md
  linksync -q backlinks people/jess.md --no-notify""",
)
@click.argument("path")
@click.option(
    "--old-path",
    default=None,
    help="Previous vault path of PATH (after a rename). Defaults to PATH.",
)
@click.option(
    "--notify/--no-notify",
    default=True,
    help="Log a summary when links were changed.",
)
@click.pass_obj
def backlinks(app: AppContext, path: str, old_path: str | None, notify: bool) -> None:
    """Update links referencing PATH (or OLD_PATH), then PATH's own links."""
    from linksync.services.sync import SyncService

    result = SyncService(app.vault).update_back_links(
        app.vault_path(path),
        old_path=old_path,
        notify=notify,
    )
    app.emit(result)
