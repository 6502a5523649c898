"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Provides lazy Vault initialization, path
normalization, and centralized result emission (stdout/stderr routing
and exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from linksync.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from linksync.config.settings import LinkSyncSettings
    from linksync.infrastructure.vault import Vault
    from linksync.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is created on first use so ``--help`` and ``--version``
    never touch the filesystem.
    """

    def __init__(self, settings: LinkSyncSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from linksync.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from linksync.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from linksync.infrastructure.vault import Vault

            self._vault = Vault(self.settings)
        return self._vault

    def vault_path(self, raw: str) -> str:
        """Turn a command-line path into a vault-relative POSIX path.

        Absolute paths, and relative paths that exist from the working
        directory, are made relative to the vault root. Anything else is
        taken as already vault-relative.
        """
        root = self.settings.vault_root.resolve()
        candidate = Path(raw)
        if candidate.is_absolute() or candidate.exists():
            resolved = candidate.resolve()
            if resolved.is_relative_to(root):
                return resolved.relative_to(root).as_posix()
        return candidate.as_posix()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
