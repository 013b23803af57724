#!/usr/bin/env python3
"""
Explainability Module - Natural-language reasons for a match score.

Only signals that carry the score get a reason: a reason is emitted for each
included signal whose weighted contribution is at least `threshold` (default
10%) of the final score. Reasons are ordered by contribution descending, then
by signal name, so the output is deterministic.
"""

from typing import Callable, Dict, List
import logging

from matchmaking.models import ActorProfile
from matchmaking.scorer.models import SignalContribution

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION_THRESHOLD = 0.10
MAX_LABELS_IN_REASON = 3


def _labels(values: List[str]) -> str:
    shown = values[:MAX_LABELS_IN_REASON]
    extra = len(values) - len(shown)
    text = ", ".join(shown)
    return f"{text} (+{extra} more)" if extra > 0 else text


def _display_name(actor: ActorProfile) -> str:
    return actor.name or actor.id


def _shared(prefix: str) -> Callable[[SignalContribution, ActorProfile, ActorProfile], str]:
    def reason(contrib: SignalContribution, a: ActorProfile, b: ActorProfile) -> str:
        shared = contrib.detail.get('shared') or []
        if shared:
            return f"{prefix}: {_labels(shared)}"
        return ""
    return reason


def _founding(contrib: SignalContribution, a: ActorProfile, b: ActorProfile) -> str:
    years = contrib.detail.get('years') or []
    if len(years) == 2 and years[0] == years[1]:
        return f"Both founded in {years[0]}"
    if len(years) == 2:
        return f"Founded around the same time ({years[0]} and {years[1]})"
    return "Founded around the same time"


def _capability_need(contrib: SignalContribution, a: ActorProfile, b: ActorProfile) -> str:
    forward = contrib.detail.get('forward_matches') or []
    reverse = contrib.detail.get('reverse_matches') or []
    if forward and reverse:
        return (
            f"Mutual fit: {_display_name(a)} covers {_labels(forward)}; "
            f"{_display_name(b)} covers {_labels(reverse)}"
        )
    if forward:
        return f"{_display_name(a)} offers what {_display_name(b)} needs: {_labels(forward)}"
    if reverse:
        return f"{_display_name(b)} offers what {_display_name(a)} needs: {_labels(reverse)}"
    return ""


REASON_BUILDERS: Dict[str, Callable[[SignalContribution, ActorProfile, ActorProfile], str]] = {
    'founding_date_proximity': _founding,
    'industry_alignment': _shared("Shared industries"),
    'platform_alignment': _shared("Shared platforms"),
    'market_alignment': _shared("Operating in same markets"),
    'technology_alignment': _shared("Shared technologies"),
    'revenue_proximity': lambda c, a, b: f"Similar revenue scale ({round(c.raw_score)}%)",
    'employee_count_proximity': lambda c, a, b: f"Compatible team sizes ({round(c.raw_score)}%)",
    'funding_proximity': lambda c, a, b: f"Similar funding levels ({round(c.raw_score)}%)",
    'name_similarity': lambda c, a, b: f"Similar names ({round(c.raw_score)}%)",
    'pitch_similarity': lambda c, a, b: f"{round(c.raw_score)}% content similarity in pitch",
    'capability_need_fit': _capability_need,
}


def reason_for(contrib: SignalContribution, actor_a: ActorProfile, actor_b: ActorProfile) -> str:
    builder = REASON_BUILDERS.get(contrib.signal)
    if builder is None:
        return f"High {contrib.signal.replace('_', ' ')} ({round(contrib.raw_score)}%)"
    return builder(contrib, actor_a, actor_b)


def explain(
    contributions: List[SignalContribution],
    final_score: float,
    threshold: float = DEFAULT_EXPLANATION_THRESHOLD
) -> List[str]:
    """
    Select the reasons to show for a match.

    Args:
        contributions: Contributions with their `reason` already filled in
        final_score: Score after the context multiplier
        threshold: Minimum share of the final score a signal must carry

    Returns:
        Reason strings, strongest signal first
    """
    if final_score <= 0:
        return []

    cutoff = threshold * final_score
    selected = [
        c for c in contributions
        if c.included and c.reason and c.weighted_contribution > 0
        and c.weighted_contribution >= cutoff
    ]
    selected.sort(key=lambda c: (-c.weighted_contribution, c.signal))
    return [c.reason for c in selected]
