#!/usr/bin/env python3
"""
Match Service - Id-based entry points over the MatchEngine.

Resolves actor ids through an ActorRepository and profile names through a
WeightProfileStore, runs the engine and hands results to a PersistenceSink.
The engine itself never touches storage.
"""

import logging
import threading
import time
from typing import Optional

from matchmaking.interfaces import ActorRepository, PersistenceSink, WeightProfileStore
from matchmaking.scorer.engine import MatchEngine
from matchmaking.scorer.models import BatchResult, MatchBatch, MatchResult
from matchmaking.taxonomy.matrix import TaxonomyMatrix, TaxonomyMatrixBuilder

logger = logging.getLogger(__name__)


class MatchService:
    """
    Orchestrates matching requests for actors known to a repository.

    Ranking options not given by the caller default to the profile's
    thresholds (min_overall_score, min_confidence, max_results).
    """

    def __init__(
        self,
        repository: ActorRepository,
        profile_store: WeightProfileStore,
        engine: Optional[MatchEngine] = None,
        sink: Optional[PersistenceSink] = None,
        taxonomy_builder: Optional[TaxonomyMatrixBuilder] = None
    ):
        self.repository = repository
        self.profile_store = profile_store
        self.engine = engine or MatchEngine()
        self.sink = sink
        self.taxonomy_builder = taxonomy_builder or TaxonomyMatrixBuilder(engine=self.engine)

    def score_pair(self, actor_a_id: str, actor_b_id: str, profile_name: str) -> MatchResult:
        """
        Score two actors by id.

        The text corpus is fitted on the consenting population, so the text
        signal agrees with find_matches for the same pair.

        Raises:
            ActorNotFound, WeightProfileNotFound, ConsentViolation
        """
        profile = self.profile_store.get(profile_name)
        actor_a = self.repository.get(actor_a_id)
        actor_b = self.repository.get(actor_b_id)
        population = [a for a in self.repository.list_all() if a.consent]
        corpus = self.engine.build_corpus(population)
        return self.engine.score_pair(actor_a, actor_b, profile, corpus=corpus)

    def find_matches(
        self,
        target_id: str,
        profile_name: str,
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
        min_confidence: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        save: bool = False
    ) -> MatchBatch:
        profile = self.profile_store.get(profile_name)
        thresholds = profile.thresholds

        batch = self.engine.find_matches(
            target_id,
            self.repository.list_all(),
            profile,
            limit=thresholds.max_results if limit is None else limit,
            min_score=thresholds.min_overall_score if min_score is None else min_score,
            min_confidence=thresholds.min_confidence if min_confidence is None else min_confidence,
            cancel_event=cancel_event,
        )

        if batch.errors:
            logger.warning(f"find_matches({target_id}) completed with {len(batch.errors)} candidate errors")
        if save and self.sink is not None and batch.matches:
            saved = self.sink.save_matches(batch.matches, profile.name)
            logger.info(f"Saved {saved} matches for {target_id} under profile {profile.name}")
        return batch

    def compute_all_matches(
        self,
        profile_name: str,
        min_score: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> BatchResult:
        """
        Score all consenting pairs and hand the kept results to the sink.

        Pairs scoring below min_score (default: the profile's
        min_overall_score) are counted as skipped.
        """
        start = time.time()
        profile = self.profile_store.get(profile_name)
        threshold = profile.thresholds.min_overall_score if min_score is None else min_score

        logger.info(f"Computing all matches with profile {profile.name} (min_score={threshold})")
        batch = self.engine.score_all_pairs(
            self.repository.list_all(), profile, min_score=threshold, cancel_event=cancel_event
        )

        result = BatchResult(
            success=len(batch.matches),
            skipped=batch.evaluated - len(batch.matches),
            failed=len(batch.errors),
            errors=[f"{e.candidate_id}: {e.error_type}: {e.message}" for e in batch.errors],
            cancelled=batch.cancelled,
        )

        if self.sink is not None and batch.matches:
            result.saved = self.sink.save_matches(batch.matches, profile.name)

        result.duration_ms = (time.time() - start) * 1000.0
        logger.info(
            f"Computed all matches: {result.success} kept, {result.skipped} below threshold, "
            f"{result.failed} failed, {result.saved} saved in {result.duration_ms:.0f}ms"
        )
        return result

    def build_taxonomy(
        self,
        profile_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> TaxonomyMatrix:
        profile = self.profile_store.get(profile_name) if profile_name else None
        return self.taxonomy_builder.build(
            self.repository.list_all(), profile, cancel_event=cancel_event
        )
