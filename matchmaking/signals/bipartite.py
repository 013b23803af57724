#!/usr/bin/env python3
"""
Bipartite Capability-Need Matching.

Scores what one actor offers against what another seeks. The result is
directional: capability_need_overlap(A.capabilities, B.needs) generally
differs from capability_need_overlap(B.capabilities, A.needs).

Label matching:
- exact (case-insensitive) match counts 1.0
- substring containment in either direction counts 0.5
"""

from typing import AbstractSet, Dict, List, Optional

EXACT_MATCH_WEIGHT = 1.0
PARTIAL_MATCH_WEIGHT = 0.5


def label_match_weight(capability: str, need: str) -> float:
    """Match weight of one capability label against one need label."""
    cap = capability.strip().lower()
    nd = need.strip().lower()
    if not cap or not nd:
        return 0.0
    if cap == nd:
        return EXACT_MATCH_WEIGHT
    if cap in nd or nd in cap:
        return PARTIAL_MATCH_WEIGHT
    return 0.0


def best_matches(capabilities: AbstractSet[str], needs: AbstractSet[str]) -> Dict[str, Dict[str, object]]:
    """For each need, the best-matching capability and its weight (zero matches omitted)."""
    result = {}
    for need in sorted(needs):
        best_cap = None
        best_weight = 0.0
        for cap in sorted(capabilities):
            weight = label_match_weight(cap, need)
            if weight > best_weight:
                best_cap, best_weight = cap, weight
                if weight == EXACT_MATCH_WEIGHT:
                    break
        if best_weight > 0:
            result[need] = {'capability': best_cap, 'weight': best_weight}
    return result


def capability_need_overlap(capabilities: AbstractSet[str], needs: AbstractSet[str]) -> Optional[float]:
    """
    Jaccard-style overlap of offered capabilities against sought needs, in [0, 100].

    overlap = 100 * sum(best match weight per need) / |capabilities U needs|

    Returns None when either side is empty (no data for this direction).
    """
    if not capabilities or not needs:
        return None
    caps = {c.strip().lower() for c in capabilities}
    nds = {n.strip().lower() for n in needs}
    matches = best_matches(caps, nds)
    matched = sum(m['weight'] for m in matches.values())
    union = len(caps | nds)
    return 100.0 * matched / union


def matched_needs(capabilities: AbstractSet[str], needs: AbstractSet[str]) -> List[str]:
    """Needs that are at least partially covered by the capabilities, sorted."""
    return sorted(best_matches(capabilities, needs).keys())
