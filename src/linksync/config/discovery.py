"""Locating ``linksync.toml``.

Lookup order, first hit wins:

1. an explicit path (``--config``)
2. the ``LINKSYNC_CONFIG`` environment variable
3. ``linksync.toml`` in the start directory or the nearest parent

An explicit or environment path that is not a file means "no config";
the walk-up search is not consulted in that case.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "linksync.toml"
CONFIG_ENV_VAR = "LINKSYNC_CONFIG"


def iter_config_candidates(start: Path | None = None) -> Iterator[Path]:
    """Yield ``linksync.toml`` paths from *start* (default: cwd) up to ``/``."""
    here = (start or Path.cwd()).resolve()
    for folder in (here, *here.parents):
        yield folder / CONFIG_FILENAME


def find_config(start: Path | None = None, *, explicit: str | Path | None = None) -> Path | None:
    """Return the config file to load, or None."""
    override = explicit or os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None
    return next((c for c in iter_config_candidates(start) if c.is_file()), None)
