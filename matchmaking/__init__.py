"""
Matchmaking - Multi-signal pairwise matching of B2B actor profiles.

Public API:
- ActorProfile: the actors being matched
- WeightProfile: persona-specific signal weights and context rules
- MatchEngine: score_pair, find_matches, score_all_pairs
- TaxonomyMatrixBuilder / build_taxonomy_matrix: capability x need aggregates
- MatchService / MatchContext: id-based entry points and wiring
"""

from matchmaking.models import ActorProfile
from matchmaking.profiles.models import WeightProfile, ContextRules, ProfileThresholds
from matchmaking.scorer.engine import MatchEngine
from matchmaking.scorer.models import MatchResult, MatchBatch, MatchStatus, BatchResult
from matchmaking.taxonomy.matrix import TaxonomyMatrix, TaxonomyMatrixBuilder, build_taxonomy_matrix
from matchmaking.service import MatchService
from matchmaking.app_context import MatchContext
from matchmaking.exceptions import (
    MatchmakingException,
    ConsentViolation,
    ActorNotFound,
    WeightProfileNotFound,
    InvalidWeightProfile,
    SignalTimeout,
)

__version__ = "0.1.0"

__all__ = [
    'ActorProfile', 'WeightProfile', 'ContextRules', 'ProfileThresholds',
    'MatchEngine', 'MatchResult', 'MatchBatch', 'MatchStatus', 'BatchResult',
    'TaxonomyMatrix', 'TaxonomyMatrixBuilder', 'build_taxonomy_matrix',
    'MatchService', 'MatchContext',
    'MatchmakingException', 'ConsentViolation', 'ActorNotFound',
    'WeightProfileNotFound', 'InvalidWeightProfile', 'SignalTimeout',
]
