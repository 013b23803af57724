"""Set overlap (Jaccard) signal."""
from typing import AbstractSet, List


def list_jaccard(set_a: AbstractSet[str], set_b: AbstractSet[str]) -> float:
    """
    Jaccard overlap scaled to [0, 100].

    Two empty sets score 0: empty sets never match.
    """
    union = set_a | set_b
    if not union:
        return 0.0
    return 100.0 * len(set_a & set_b) / len(union)


def shared_labels(set_a: AbstractSet[str], set_b: AbstractSet[str]) -> List[str]:
    return sorted(set_a & set_b)
