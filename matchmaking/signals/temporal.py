"""Date proximity signal."""
import math
from datetime import date
from typing import Optional

DEFAULT_DECAY_DAYS = 730.0


def date_proximity(date_a: Optional[date], date_b: Optional[date], decay_days: float = DEFAULT_DECAY_DAYS) -> Optional[float]:
    """
    Exponential-decay proximity of two dates.

    score = 100 * exp(-|delta days| / decay_days)

    Returns None when either date is missing, so callers can exclude the
    signal instead of scoring it as zero.
    """
    if date_a is None or date_b is None:
        return None
    if decay_days <= 0:
        raise ValueError(f"decay_days must be positive, got {decay_days}")
    delta_days = abs((date_a - date_b).days)
    return 100.0 * math.exp(-delta_days / decay_days)
