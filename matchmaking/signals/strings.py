#!/usr/bin/env python3
"""
String Similarity - Normalized Levenshtein edit distance.
"""

from typing import Callable, Optional

# Rows between budget checks in the edit-distance loop
_CHECK_EVERY_ROWS = 32


def levenshtein_distance(s1: str, s2: str, check: Optional[Callable[[], None]] = None) -> int:
    """
    Compute Levenshtein edit distance between two strings.

    Uses dynamic programming with O(min(m,n)) space (two-row approach).

    Args:
        s1: First string.
        s2: Second string.
        check: Optional callable invoked every few rows; it may raise to
            abort a computation that has run over its budget.

    Returns:
        Minimum number of single-character edits (insertions, deletions,
        substitutions) to transform s1 into s2.
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Keep s1 the shorter string
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    len1 = len(s1)
    len2 = len(s2)

    prev_row = list(range(len1 + 1))
    curr_row = [0] * (len1 + 1)

    for j in range(1, len2 + 1):
        if check is not None and j % _CHECK_EVERY_ROWS == 0:
            check()
        curr_row[0] = j
        for i in range(1, len1 + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                curr_row[i - 1] + 1,      # insertion
                prev_row[i] + 1,          # deletion
                prev_row[i - 1] + cost,   # substitution
            )
        prev_row, curr_row = curr_row, prev_row

    return prev_row[len1]


def levenshtein_similarity(s1: str, s2: str, check: Optional[Callable[[], None]] = None) -> Optional[float]:
    """
    Normalized edit similarity scaled to [0, 100].

    score = 100 * (1 - distance / max(len(a), len(b)))

    Comparison is case-insensitive. Returns None if either string is empty.
    """
    a = (s1 or "").strip().casefold()
    b = (s2 or "").strip().casefold()
    if not a or not b:
        return None
    distance = levenshtein_distance(a, b, check=check)
    return 100.0 * (1.0 - distance / max(len(a), len(b)))
