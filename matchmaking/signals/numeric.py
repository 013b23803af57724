"""Numeric proximity signal on a log10 scale."""
import math
from typing import Optional


def numeric_log_proximity(value_a: Optional[float], value_b: Optional[float]) -> Optional[float]:
    """
    Similarity of two strictly-positive metrics (revenue, funding, headcount).

    score = 100 * exp(-|log10(a) - log10(b)|)

    One order of magnitude apart scores ~36.8. Returns None when either value
    is missing or not strictly positive.
    """
    if value_a is None or value_b is None:
        return None
    if value_a <= 0 or value_b <= 0:
        return None
    diff = abs(math.log10(value_a) - math.log10(value_b))
    return 100.0 * math.exp(-diff)
