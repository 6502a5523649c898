"""Normalized edit-distance similarity between two strings.

Pure functions, no dependencies. Used by the alias resolver to decide
whether a link text is a near-miss of a declared alias.
"""

from __future__ import annotations


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit-cost insert, delete, and substitute.

    Keeps two rows of the DP table, sized by the shorter string.

    Examples:
        >>> edit_distance("kitten", "sitting")
        3
        >>> edit_distance("", "abc")
        3
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Return ``1 - distance / max(len(a), len(b))`` in ``[0, 1]``.

    Two empty strings are identical and score ``1.0``.

    Examples:
        >>> similarity("Project X", "Project Z")  # doctest: +ELLIPSIS
        0.888...
        >>> similarity("", "")
        1.0
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest
