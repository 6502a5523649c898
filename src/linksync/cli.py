"""Root CLI group for linksync with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from linksync import __version__
from linksync.commands import register_commands
from linksync.commands._context import AppContext
from linksync.config.settings import LinkSyncSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="linksync")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    envvar="LINKSYNC_CONFIG",
    help="Override config file path.",
)
@click.option(
    "--vault",
    "vault_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Vault directory (default: the config file's folder, else CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    vault_root: Path | None,
) -> None:
    """linksync — keep link text in step with the titles of linked notes."""
    ctx.ensure_object(dict)
    settings = LinkSyncSettings.from_cli(
        config_path=config_path,
        vault_root=vault_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
