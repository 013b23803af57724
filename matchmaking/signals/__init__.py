"""Signals Module - Stateless similarity calculators, one per signal family."""
from matchmaking.signals.base import (
    SignalKind, SignalOutcome, DirectionalScore, PairBudget, SignalContext,
    SymmetricSignal, DirectionalSignal
)
from matchmaking.signals.temporal import date_proximity
from matchmaking.signals.sets import list_jaccard
from matchmaking.signals.numeric import numeric_log_proximity
from matchmaking.signals.strings import levenshtein_distance, levenshtein_similarity
from matchmaking.signals.text import TfidfCorpus, TextVectors
from matchmaking.signals.bipartite import capability_need_overlap, label_match_weight
from matchmaking.signals.registry import SIGNALS, SIGNAL_NAMES, get_signal

__all__ = [
    'SignalKind', 'SignalOutcome', 'DirectionalScore', 'PairBudget', 'SignalContext',
    'SymmetricSignal', 'DirectionalSignal',
    'date_proximity', 'list_jaccard', 'numeric_log_proximity',
    'levenshtein_distance', 'levenshtein_similarity',
    'TfidfCorpus', 'TextVectors',
    'capability_need_overlap', 'label_match_weight',
    'SIGNALS', 'SIGNAL_NAMES', 'get_signal'
]
