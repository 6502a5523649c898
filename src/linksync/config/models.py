"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, linksync.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LinkSettings(BaseModel):
    """[links] section — the options the rewrite engine reads.

    Frozen: the engine receives one instance at construction and never
    mutates it. ``auto_update`` and ``debounce_delay`` (milliseconds) are
    for whatever triggers the engine; the engine itself ignores them.
    """

    model_config = {"frozen": True}

    use_frontmatter_title: bool = True
    frontmatter_title_property: str = "title"
    use_first_heading: bool = True
    use_aliases: bool = True
    similarity_threshold: float = Field(default=0.65, ge=0.0, le=1.0)
    auto_update: bool = True
    debounce_delay: int = Field(default=1000, ge=0)


class VaultConfig(BaseModel):
    """[vault] section: directory names skipped when listing documents."""

    model_config = {"frozen": True}

    ignore: list[str] = Field(default_factory=lambda: [".obsidian", ".git", ".trash"])

