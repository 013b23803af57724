#!/usr/bin/env python3
"""
Scoring Models - Data structures for match results and batches.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from matchmaking.utils import to_native_types


class MatchStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


@dataclass(frozen=True)
class SignalContribution:
    """
    One signal's part in a match score.

    weighted_contribution = weight * raw_score / sum(included weights), so the
    contributions of included signals add up to the weighted average.
    """
    signal: str
    raw_score: float
    weight: float
    weighted_contribution: float
    included: bool
    reason: str = ""
    detail: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass
class MatchResult:
    """Complete scored match between two actors."""
    actor_a_id: str
    actor_b_id: str
    score: float
    confidence: float
    profile_name: str

    contributions: List[SignalContribution] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)
    context_multiplier: float = 1.0
    context_details: Dict[str, Any] = field(default_factory=dict)
    status: MatchStatus = MatchStatus.PENDING

    # Directional capability/need values: forward = A offers, B needs
    capability_need: Dict[str, Optional[float]] = field(
        default_factory=lambda: {'forward': None, 'reverse': None}
    )
    timed_out_signals: List[str] = field(default_factory=list)

    @property
    def edge_id(self) -> str:
        """Order-independent pair id, e.g. "a1__b2"."""
        return "__".join(sorted([self.actor_a_id, self.actor_b_id]))

    @property
    def weighted_average(self) -> float:
        """Score before the context multiplier was applied."""
        return sum(c.weighted_contribution for c in self.contributions if c.included)

    def contribution(self, signal: str) -> Optional[SignalContribution]:
        for c in self.contributions:
            if c.signal == signal:
                return c
        return None

    def to_dict(self) -> Dict[str, Any]:
        return to_native_types({
            'edge_id': self.edge_id,
            'actor_a_id': self.actor_a_id,
            'actor_b_id': self.actor_b_id,
            'score': round(self.score, 2),
            'confidence': round(self.confidence, 2),
            'profile_name': self.profile_name,
            'status': self.status.value,
            'context_multiplier': self.context_multiplier,
            'context_details': self.context_details,
            'capability_need': self.capability_need,
            'reasons': list(self.reasons),
            'timed_out_signals': list(self.timed_out_signals),
            'contributions': [
                {
                    'signal': c.signal,
                    'raw_score': c.raw_score,
                    'weight': c.weight,
                    'weighted_contribution': c.weighted_contribution,
                    'included': c.included,
                    'reason': c.reason,
                }
                for c in self.contributions
            ],
        })


@dataclass(frozen=True)
class CandidateError:
    """A candidate that could not be scored within a batch request."""
    candidate_id: str
    error_type: str
    message: str


@dataclass
class MatchBatch:
    """
    Ranked results of a find_matches or score_all_pairs request.

    `partial` is set when the request was cancelled or some candidates
    failed; `matches` then holds everything that completed.
    """
    matches: List[MatchResult] = field(default_factory=list)
    errors: List[CandidateError] = field(default_factory=list)
    cancelled: bool = False
    timeouts: int = 0
    evaluated: int = 0

    @property
    def partial(self) -> bool:
        return self.cancelled or bool(self.errors)

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __getitem__(self, index: int) -> MatchResult:
        return self.matches[index]


@dataclass
class BatchResult:
    """Summary of an all-pairs computation handed to a persistence sink."""
    success: int = 0
    skipped: int = 0
    failed: int = 0
    saved: int = 0
    errors: List[str] = field(default_factory=list)
    duration_ms: float = 0.0
    cancelled: bool = False
