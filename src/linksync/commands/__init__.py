"""Subcommand modules for linksync.

Provides register_commands(), which uses deferred imports to keep
``linksync --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from linksync.commands.backlinks import backlinks
    from linksync.commands.referrers import referrers
    from linksync.commands.update import update
    from linksync.commands.update_all import update_all

    cli.add_command(update)
    cli.add_command(backlinks)
    cli.add_command(update_all)
    cli.add_command(referrers)
