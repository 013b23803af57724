#!/usr/bin/env python3
"""
Scoring Module - Weighted multi-signal match scoring.

Public API:
- MatchEngine: score_pair, find_matches, score_all_pairs
- MatchResult / MatchBatch: results of single-pair and ranking requests

Modules:
- models.py: Data structures (MatchResult, SignalContribution, MatchBatch)
- explainability.py: Natural-language reasons per signal
- engine.py: MatchEngine orchestrator
"""

from matchmaking.scorer.models import (
    MatchStatus, SignalContribution, MatchResult, CandidateError, MatchBatch, BatchResult
)
from matchmaking.scorer.engine import MatchEngine

__all__ = [
    'MatchEngine', 'MatchStatus', 'SignalContribution', 'MatchResult',
    'CandidateError', 'MatchBatch', 'BatchResult'
]
