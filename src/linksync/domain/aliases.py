"""Alias matching — decide whether a link text is an intentional alias.

Front-matter ``aliases`` may be absent, a single string, or a list of
strings. :func:`normalize_aliases` folds all three into an ordered list
before :func:`resolve_alias` runs its three passes:

1. exact match (case-insensitive)
2. substring match in either direction (case-insensitive)
3. fuzzy match on :func:`~linksync.domain.similarity.similarity`

The first pass that produces a hit wins. Within a pass, aliases are
scanned in declaration order, so ``["Jessica", "Jess"]`` with link text
``"Jess"`` stops at the exact pass and never reaches the substring pass
that would pick ``"Jessica"``.
"""

from __future__ import annotations

from typing import Any

from linksync.domain.similarity import similarity


def normalize_aliases(value: Any) -> list[str]:
    """Normalize a raw front-matter ``aliases`` value to a list of strings.

    Examples:
        >>> normalize_aliases(None)
        []
        >>> normalize_aliases("Doggo")
        ['Doggo']
        >>> normalize_aliases(["Hello", "", None, "World"])
        ['Hello', 'World']
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and str(item)]
    return []


def resolve_alias(text: str, aliases: list[str], threshold: float) -> str | None:
    """Return the alias *text* refers to, or None when no alias qualifies.

    The returned value keeps the alias's original casing. Fuzzy ties keep
    the first alias that reached the top score.
    """
    if not aliases:
        return None

    needle = text.lower()

    for alias in aliases:
        if alias.lower() == needle:
            return alias

    for alias in aliases:
        folded = alias.lower()
        if needle in folded or folded in needle:
            return alias

    best_alias: str | None = None
    best_score = -1.0
    for alias in aliases:
        score = similarity(needle, alias.lower())
        if score > best_score:
            best_alias = alias
            best_score = score

    if best_alias is not None and best_score >= threshold:
        return best_alias
    return None
