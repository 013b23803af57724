#!/usr/bin/env python3
"""
Match Engine - Weighted multi-signal scoring of actor pairs.

score = min(100, (sum(w_i * s_i) / sum(w_i)) * context_multiplier)

over the signals that had data on both sides and carry weight > 0.
Confidence is the share of weighted signals that had data:

    confidence = 100 * included / configured

Ranking requests (find_matches, score_all_pairs) fit one TF-IDF corpus per
request, split the pairs into batches of `batch_size` and score the batches
on a thread pool capped at `max_workers`. Vectors are computed per batch and
dropped when the batch finishes. Each pair runs under a cooperative time
budget; a signal that overruns it is excluded and counted, never fatal.
"""

import logging
import threading
import time
from collections import Counter
from concurrent.futures import CancelledError, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from itertools import combinations
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from matchmaking.cache.similarity_cache import SimilarityCache
from matchmaking.config_loader import EngineConfig
from matchmaking.context.rules import ContextRuleEngine
from matchmaking.exceptions import ActorNotFound, ConsentViolation, SignalTimeout
from matchmaking.models import ActorProfile
from matchmaking.profiles.models import WeightProfile
from matchmaking.scorer.explainability import explain, reason_for
from matchmaking.scorer.models import (
    CandidateError, MatchBatch, MatchResult, SignalContribution
)
from matchmaking.signals.base import (
    DirectionalScore, DirectionalSignal, PairBudget, SignalContext, SignalOutcome
)
from matchmaking.signals.registry import Signal, get_signal
from matchmaking.signals.text import TfidfCorpus, TextVectors
from matchmaking.utils import clamp_score

logger = logging.getLogger(__name__)

Pair = Tuple[ActorProfile, ActorProfile]


@dataclass
class _ChunkResult:
    matches: List[MatchResult] = field(default_factory=list)
    errors: List[CandidateError] = field(default_factory=list)
    evaluated: int = 0
    timeouts: int = 0
    stopped: bool = False


def _check_consent(actor: ActorProfile) -> None:
    if not actor.consent:
        raise ConsentViolation(actor.id)


def _dedupe(actors: Iterable[ActorProfile]) -> Dict[str, ActorProfile]:
    """Index actors by id, keeping the first occurrence of each id."""
    pool: Dict[str, ActorProfile] = {}
    for actor in actors:
        if actor.id in pool:
            logger.debug(f"Ignoring duplicate actor {actor.id}")
            continue
        pool[actor.id] = actor
    return pool


class MatchEngine:
    """
    Scores and ranks actor pairs under a WeightProfile.

    The engine holds no per-request state. The only shared mutable state is
    the optional SimilarityCache and the lock-guarded timeout counter.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        cache: Optional[SimilarityCache] = None,
        context_engine: Optional[ContextRuleEngine] = None
    ):
        self.config = config or EngineConfig()
        self.cache = cache
        self.context_engine = context_engine or ContextRuleEngine(
            min_multiplier=self.config.min_context_multiplier,
            max_multiplier=self.config.max_context_multiplier,
        )
        self._timeouts: Counter = Counter()
        self._timeouts_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Single pair
    # ------------------------------------------------------------------

    def build_corpus(self, actors: Iterable[ActorProfile]) -> TfidfCorpus:
        return TfidfCorpus.from_actors(actors, min_tokens=self.config.min_text_tokens)

    def score_pair(
        self,
        actor_a: ActorProfile,
        actor_b: ActorProfile,
        profile: WeightProfile,
        corpus: Optional[TfidfCorpus] = None
    ) -> MatchResult:
        """
        Score one pair of actors.

        Args:
            actor_a: First actor (the "forward" side of directional signals)
            actor_b: Second actor
            profile: Weight profile to score under
            corpus: TF-IDF corpus for the text signal; defaults to one fitted
                on the two actors' texts

        Raises:
            ConsentViolation: if either actor has not consented
        """
        _check_consent(actor_a)
        _check_consent(actor_b)
        if corpus is None:
            corpus = self.build_corpus([actor_a, actor_b])
        return self._score(actor_a, actor_b, profile, corpus, None)

    def _new_context(self, corpus: Optional[TfidfCorpus], vectors: Optional[TextVectors]) -> SignalContext:
        return SignalContext(
            budget=PairBudget(self.config.pair_budget_ms),
            corpus=corpus,
            text_vectors=vectors,
            date_decay_days=self.config.date_decay_days,
        )

    def _cached(
        self,
        signal: Signal,
        left: ActorProfile,
        right: ActorProfile,
        ctx: SignalContext,
        symmetric: bool,
        compute: Callable[[], SignalOutcome]
    ) -> SignalOutcome:
        if self.cache is None:
            return compute()
        scope = signal.scope(ctx) if signal.scope is not None else ""
        key = SimilarityCache.make_key(signal.name, left, right, signal.fields, symmetric, scope)
        return self.cache.get_or_compute(key, compute)

    def _evaluate_directional(
        self,
        signal: DirectionalSignal,
        actor_a: ActorProfile,
        actor_b: ActorProfile,
        ctx: SignalContext
    ) -> DirectionalScore:
        # Each direction is cached under its own ordered key
        return signal.evaluate(
            actor_a, actor_b, ctx,
            run=lambda offering, seeking, compute: self._cached(signal, offering, seeking, ctx, False, compute)
        )

    def _record_timeout(self, error: SignalTimeout, actor_a: ActorProfile, actor_b: ActorProfile) -> None:
        with self._timeouts_lock:
            self._timeouts[error.signal] += 1
        logger.warning(f"Excluded {error.signal} for {actor_a.id}/{actor_b.id}: {error}")

    @property
    def timeout_counts(self) -> Dict[str, int]:
        """Signal timeouts observed by this engine, by signal name."""
        with self._timeouts_lock:
            return dict(self._timeouts)

    def _score(
        self,
        actor_a: ActorProfile,
        actor_b: ActorProfile,
        profile: WeightProfile,
        corpus: Optional[TfidfCorpus],
        vectors: Optional[TextVectors]
    ) -> MatchResult:
        ctx = self._new_context(corpus, vectors)
        configured = profile.configured_signals()

        outcomes: Dict[str, SignalOutcome] = {}
        timed_out: List[str] = []
        capability_need: Dict[str, Optional[float]] = {'forward': None, 'reverse': None}

        for name in configured:
            signal = get_signal(name)
            try:
                if isinstance(signal, DirectionalSignal):
                    directional = self._evaluate_directional(signal, actor_a, actor_b, ctx)
                    outcome = directional.combined()
                    capability_need = {
                        'forward': directional.forward.score if directional.forward.included else None,
                        'reverse': directional.reverse.score if directional.reverse.included else None,
                    }
                else:
                    outcome = self._cached(
                        signal, actor_a, actor_b, ctx, True,
                        lambda s=signal: s.compute(actor_a, actor_b, ctx)
                    )
            except SignalTimeout as e:
                self._record_timeout(e, actor_a, actor_b)
                timed_out.append(name)
                outcome = SignalOutcome.excluded("timeout")
            outcomes[name] = outcome

        included = [name for name in configured if outcomes[name].included]
        total_weight = sum(profile.weight(name) for name in included)

        contributions: List[SignalContribution] = []
        weighted_average = 0.0
        for name in configured:
            outcome = outcomes[name]
            weight = profile.weight(name)
            if outcome.included and total_weight > 0:
                raw = clamp_score(outcome.score)
                share = weight * raw / total_weight
                weighted_average += share
            else:
                raw, share = 0.0, 0.0
            contributions.append(SignalContribution(
                signal=name,
                raw_score=raw,
                weight=weight,
                weighted_contribution=share,
                included=outcome.included,
                detail=outcome.detail,
            ))

        adjustment = self.context_engine.evaluate(actor_a, actor_b, profile.context_rules)
        if included:
            score = clamp_score(self.context_engine.apply(weighted_average, adjustment))
        else:
            score = 0.0
        confidence = 100.0 * len(included) / len(configured) if configured else 0.0

        contributions = [
            replace(c, reason=reason_for(c, actor_a, actor_b)) if c.included else c
            for c in contributions
        ]
        contributions.sort(key=lambda c: (-c.weighted_contribution, c.signal))

        return MatchResult(
            actor_a_id=actor_a.id,
            actor_b_id=actor_b.id,
            score=score,
            confidence=confidence,
            profile_name=profile.name,
            contributions=contributions,
            reasons=explain(contributions, score, self.config.explanation_threshold),
            context_multiplier=adjustment.multiplier,
            context_details=adjustment.details,
            capability_need=capability_need,
            timed_out_signals=timed_out,
        )

    # ------------------------------------------------------------------
    # Ranking
    # ------------------------------------------------------------------

    def find_matches(
        self,
        target_id: str,
        candidates: Iterable[ActorProfile],
        profile: WeightProfile,
        limit: Optional[int] = None,
        min_score: float = 0.0,
        min_confidence: float = 0.0,
        cancel_event: Optional[threading.Event] = None
    ) -> MatchBatch:
        """
        Rank candidates against a target actor.

        The target is resolved inside `candidates`. Non-consenting candidates
        and the target itself are dropped before scoring. Results are sorted
        by score desc, confidence desc, candidate id asc and cut to `limit`.

        Raises:
            ActorNotFound: if target_id is not in the candidate pool
            ConsentViolation: if the target has not consented
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        pool = _dedupe(candidates)
        target = pool.get(target_id)
        if target is None:
            raise ActorNotFound(target_id)
        _check_consent(target)

        eligible = [
            actor for actor_id, actor in sorted(pool.items())
            if actor_id != target_id and actor.consent
        ]
        skipped = len(pool) - 1 - len(eligible)
        if skipped:
            logger.debug(f"Dropped {skipped} non-consenting candidates for {target_id}")

        start = time.time()
        corpus = self.build_corpus([target] + eligible)
        batch = self._run_pairs(
            [(target, candidate) for candidate in eligible],
            profile, corpus, min_score, min_confidence, cancel_event
        )
        batch.matches.sort(key=lambda m: (-m.score, -m.confidence, m.actor_b_id))
        if limit is not None:
            batch.matches = batch.matches[:limit]

        logger.info(
            f"find_matches({target_id}, profile={profile.name}): {len(batch.matches)} matches "
            f"from {batch.evaluated}/{len(eligible)} candidates in {time.time() - start:.2f}s"
            + (" (cancelled)" if batch.cancelled else "")
        )
        return batch

    def score_all_pairs(
        self,
        actors: Iterable[ActorProfile],
        profile: WeightProfile,
        min_score: float = 0.0,
        cancel_event: Optional[threading.Event] = None
    ) -> MatchBatch:
        """
        Score every unordered pair of consenting actors.

        Each pair is scored once with the lower id as actor A. Results are
        sorted by score desc, confidence desc, edge id asc.
        """
        pool = _dedupe(actors)
        eligible = [actor for _, actor in sorted(pool.items()) if actor.consent]

        start = time.time()
        corpus = self.build_corpus(eligible)
        pairs = list(combinations(eligible, 2))
        batch = self._run_pairs(pairs, profile, corpus, min_score, 0.0, cancel_event)
        batch.matches.sort(key=lambda m: (-m.score, -m.confidence, m.edge_id))

        logger.info(
            f"score_all_pairs(profile={profile.name}): {len(batch.matches)} matches "
            f"from {batch.evaluated}/{len(pairs)} pairs of {len(eligible)} actors "
            f"in {time.time() - start:.2f}s"
        )
        return batch

    def _score_chunk(
        self,
        pairs: Sequence[Pair],
        profile: WeightProfile,
        corpus: TfidfCorpus,
        min_score: float,
        min_confidence: float,
        cancel_event: threading.Event
    ) -> _ChunkResult:
        result = _ChunkResult()
        if cancel_event.is_set():
            result.stopped = True
            return result

        actors = _dedupe(actor for pair in pairs for actor in pair)
        vectors = corpus.vectorize(actors.values())

        for actor_a, actor_b in pairs:
            if cancel_event.is_set():
                result.stopped = True
                break
            try:
                match = self._score(actor_a, actor_b, profile, corpus, vectors)
            except Exception as e:
                logger.error(f"Failed to score {actor_a.id}/{actor_b.id}: {e}")
                result.errors.append(CandidateError(
                    candidate_id=actor_b.id,
                    error_type=type(e).__name__,
                    message=str(e),
                ))
                continue
            result.evaluated += 1
            result.timeouts += len(match.timed_out_signals)
            if match.score >= min_score and match.confidence >= min_confidence:
                result.matches.append(match)
        return result

    def _run_pairs(
        self,
        pairs: List[Pair],
        profile: WeightProfile,
        corpus: TfidfCorpus,
        min_score: float,
        min_confidence: float,
        cancel_event: Optional[threading.Event]
    ) -> MatchBatch:
        if cancel_event is None:
            cancel_event = threading.Event()

        batch = MatchBatch()
        if not pairs:
            return batch

        size = self.config.batch_size
        chunks = [pairs[i:i + size] for i in range(0, len(pairs), size)]
        workers = max(1, min(self.config.max_workers, len(chunks)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_chunk = {
                executor.submit(
                    self._score_chunk, chunk, profile, corpus,
                    min_score, min_confidence, cancel_event
                ): chunk
                for chunk in chunks
            }

            for future in as_completed(future_to_chunk):
                if cancel_event.is_set() and not batch.cancelled:
                    batch.cancelled = True
                    for pending in future_to_chunk:
                        pending.cancel()
                try:
                    chunk_result = future.result()
                except CancelledError:
                    batch.cancelled = True
                    continue
                except Exception as e:
                    chunk = future_to_chunk[future]
                    logger.error(f"Batch of {len(chunk)} pairs failed: {e}")
                    batch.errors.extend(
                        CandidateError(candidate_id=b.id, error_type=type(e).__name__, message=str(e))
                        for _, b in chunk
                    )
                    continue

                batch.matches.extend(chunk_result.matches)
                batch.errors.extend(chunk_result.errors)
                batch.evaluated += chunk_result.evaluated
                batch.timeouts += chunk_result.timeouts
                if chunk_result.stopped:
                    batch.cancelled = True

        return batch
