"""String similarity used to rank near matches."""

from __future__ import annotations


def levenshtein_distance(a: str, b: str) -> int:
    """Compute the edit distance between two strings.

    Counts the minimum number of single-character insertions, deletions and
    substitutions needed to turn ``a`` into ``b``. Case-sensitive.

    Args:
        a: First string.
        b: Second string.

    Returns:
        The edit distance, 0 when the strings are equal.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two-row DP over b's prefixes
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous = current
    return previous[len(b)]


def similarity_score(a: str, b: str) -> float:
    """Normalized, case-insensitive similarity between two strings.

    Returns:
        1.0 for identical strings (including two empty strings), 0.0 when
        exactly one string is empty, otherwise ``1 - distance / max_length``.
    """
    a = a.lower()
    b = b.lower()
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    longest = max(len(a), len(b))
    return 1.0 - levenshtein_distance(a, b) / longest


__all__ = ["levenshtein_distance", "similarity_score"]
