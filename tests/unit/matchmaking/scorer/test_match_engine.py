"""
Tests for MatchEngine.score_pair: weighted averaging, confidence, context
multipliers, explanations, consent and timeouts.
"""
import math
from datetime import date

import pytest

from matchmaking.cache.similarity_cache import SimilarityCache
from matchmaking.config_loader import EngineConfig
from matchmaking.exceptions import ConsentViolation
from matchmaking.profiles.store import default_profiles
from matchmaking.scorer.engine import MatchEngine
from matchmaking.scorer.models import MatchStatus
from tests import make_actor, make_profile


@pytest.fixture
def actor_a():
    return make_actor("a", industries=["gaming", "mobile"], founded=date(2020, 1, 1))


@pytest.fixture
def actor_b():
    return make_actor("b", industries=["gaming", "mobile", "console"], founded=date(2021, 1, 1))


class TestScorePairScenarios:
    """Concrete scoring scenarios."""

    def test_industries_and_founding_date(self, engine, industry_date_profile, actor_a, actor_b):
        result = engine.score_pair(actor_a, actor_b, industry_date_profile)

        jaccard = 100.0 * 2 / 3
        date_score = 100.0 * math.exp(-366 / 730)
        expected = (80 * jaccard + 20 * date_score) / 100

        assert result.score == pytest.approx(expected)
        assert min(jaccard, date_score) < result.score < max(jaccard, date_score)
        assert result.confidence == 100.0
        assert result.contribution('industry_alignment').raw_score == pytest.approx(66.667, abs=1e-3)
        assert result.status == MatchStatus.PENDING

    def test_reasons_ordered_by_contribution(self, engine, industry_date_profile, actor_a, actor_b):
        result = engine.score_pair(actor_a, actor_b, industry_date_profile)
        assert result.reasons == [
            "Shared industries: gaming, mobile",
            "Founded around the same time (2020 and 2021)",
        ]
        assert [c.signal for c in result.contributions] == [
            'industry_alignment', 'founding_date_proximity'
        ]

    def test_contributions_sum_to_weighted_average(self, engine, industry_date_profile, actor_a, actor_b):
        result = engine.score_pair(actor_a, actor_b, industry_date_profile)
        assert result.weighted_average == pytest.approx(result.score)
        assert sum(c.weighted_contribution for c in result.contributions) == pytest.approx(result.score)

    def test_no_data_scores_zero(self, engine, industry_date_profile, actor_a):
        actor_c = make_actor("c")

        result = engine.score_pair(actor_c, actor_a, industry_date_profile)

        assert result.score == 0.0
        assert result.confidence == 0.0
        assert result.reasons == []
        assert all(not c.included for c in result.contributions)

    def test_missing_signal_leaves_denominator(self, engine):
        profile = make_profile({'industry_alignment': 50, 'revenue_proximity': 50})
        a = make_actor("a", industries=["gaming"], revenue=1_000_000)
        b = make_actor("b", industries=["gaming"])

        result = engine.score_pair(a, b, profile)

        assert result.score == pytest.approx(100.0)
        assert result.confidence == pytest.approx(50.0)

    def test_unweighted_signals_not_computed(self, engine):
        profile = make_profile({'industry_alignment': 10, 'name_similarity': 0})
        result = engine.score_pair(make_actor("a", industries=["x"]), make_actor("b", industries=["x"]), profile)
        assert [c.signal for c in result.contributions] == ['industry_alignment']


class TestScorePairContext:
    """Context multipliers applied after the weighted average."""

    def test_platform_boost_applied(self, engine):
        profile = make_profile(
            {'industry_alignment': 100},
            context_rules={'platform_boosts': {'vr': 1.2}},
        )
        a = make_actor("a", industries=["gaming", "mobile"], platforms=["vr"])
        b = make_actor("b", industries=["gaming"], platforms=["vr"])

        result = engine.score_pair(a, b, profile)

        assert result.context_multiplier == pytest.approx(1.2)
        assert result.score == pytest.approx(50.0 * 1.2)

    def test_boosted_score_capped_at_100(self, engine):
        profile = make_profile(
            {'industry_alignment': 100},
            context_rules={'platform_boosts': {'vr': 2.5}},
        )
        a = make_actor("a", industries=["gaming"], platforms=["vr"])
        b = make_actor("b", industries=["gaming"], platforms=["vr"])
        assert engine.score_pair(a, b, profile).score == 100.0


class TestScorePairInvariants:
    """Bounds, idempotence, consent and directional reporting."""

    def test_consent_violation(self, engine, industry_date_profile, actor_a):
        actor_d = make_actor("d", consent=False, industries=["gaming"])
        with pytest.raises(ConsentViolation) as exc_info:
            engine.score_pair(actor_d, actor_a, industry_date_profile)
        assert exc_info.value.actor_id == "d"
        with pytest.raises(ConsentViolation):
            engine.score_pair(actor_a, actor_d, industry_date_profile)

    def test_idempotent(self, engine, studio_population):
        profile = next(p for p in default_profiles() if p.name == "general")
        a, b = studio_population[0], studio_population[1]

        first = engine.score_pair(a, b, profile)
        second = engine.score_pair(a, b, profile)

        assert first.to_dict() == second.to_dict()
        assert first.reasons == second.reasons

    def test_scores_bounded_for_every_pair(self, engine, studio_population):
        consenting = [a for a in studio_population if a.consent]
        for profile in default_profiles():
            for a in consenting:
                for b in consenting:
                    if a.id == b.id:
                        continue
                    result = engine.score_pair(a, b, profile)
                    assert 0.0 <= result.score <= 100.0
                    assert 0.0 <= result.confidence <= 100.0

    def test_capability_need_directions_reported(self, engine, studio_population):
        profile = make_profile({'capability_need_fit': 100})
        studio, publisher = studio_population[0], studio_population[1]

        forward = engine.score_pair(studio, publisher, profile)
        backward = engine.score_pair(publisher, studio, profile)

        # studio offers {game development, art} to publisher needing {game development}
        assert forward.capability_need['forward'] == pytest.approx(50.0)
        # publisher offers {publishing, marketing} to studio needing {publishing, funding}
        assert forward.capability_need['reverse'] == pytest.approx(100.0 / 3)
        assert backward.capability_need['forward'] == pytest.approx(forward.capability_need['reverse'])
        assert forward.score == pytest.approx((50.0 + 100.0 / 3) / 2)
        assert forward.score == pytest.approx(backward.score)

    def test_edge_id_sorted(self, engine, industry_date_profile, actor_a, actor_b):
        assert engine.score_pair(actor_b, actor_a, industry_date_profile).edge_id == "a__b"

    def test_to_dict_is_json_native(self, engine, industry_date_profile, actor_a, actor_b):
        data = engine.score_pair(actor_a, actor_b, industry_date_profile).to_dict()
        assert data['status'] == "pending"
        assert data['edge_id'] == "a__b"
        assert isinstance(data['contributions'], list)
        assert data['contributions'][0]['signal'] == 'industry_alignment'


class TestScorePairTimeouts:
    """Per-pair budget handling."""

    def test_expired_budget_excludes_signals(self, industry_date_profile, actor_a, actor_b):
        engine = MatchEngine(config=EngineConfig(pair_budget_ms=0))

        result = engine.score_pair(actor_a, actor_b, industry_date_profile)

        assert result.score == 0.0
        assert result.confidence == 0.0
        assert sorted(result.timed_out_signals) == ['founding_date_proximity', 'industry_alignment']
        assert engine.timeout_counts == {'founding_date_proximity': 1, 'industry_alignment': 1}

    def test_timeouts_are_not_cached(self, industry_date_profile, actor_a, actor_b):
        cache = SimilarityCache(max_entries=100)
        MatchEngine(config=EngineConfig(pair_budget_ms=0), cache=cache).score_pair(
            actor_a, actor_b, industry_date_profile
        )
        assert len(cache) == 0

        result = MatchEngine(config=EngineConfig(pair_budget_ms=None), cache=cache).score_pair(
            actor_a, actor_b, industry_date_profile
        )
        assert result.confidence == 100.0


class TestScorePairCaching:
    """Raw outcomes shared through the similarity cache."""

    def test_cached_results_match_uncached(self, studio_population):
        profile = next(p for p in default_profiles() if p.name == "general")
        a, b = studio_population[0], studio_population[1]
        cache = SimilarityCache(max_entries=1000)
        cached_engine = MatchEngine(config=EngineConfig(pair_budget_ms=None), cache=cache)
        plain_engine = MatchEngine(config=EngineConfig(pair_budget_ms=None))

        first = cached_engine.score_pair(a, b, profile)
        second = cached_engine.score_pair(b, a, profile)
        plain = plain_engine.score_pair(a, b, profile)

        assert first.score == pytest.approx(plain.score)
        assert second.score == pytest.approx(first.score)
        assert cache.get_cache_stats()['hits'] > 0

    def test_cache_shared_across_profiles(self, actor_a, actor_b):
        cache = SimilarityCache(max_entries=100)
        engine = MatchEngine(config=EngineConfig(pair_budget_ms=None), cache=cache)

        engine.score_pair(actor_a, actor_b, make_profile({'industry_alignment': 10}, name="one"))
        result = engine.score_pair(actor_a, actor_b, make_profile({'industry_alignment': 90}, name="two"))

        assert cache.get_cache_stats()['hits'] == 1
        assert result.score == pytest.approx(100.0 * 2 / 3)

    def test_directional_signal_cached_per_direction(self, studio_population):
        profile = make_profile({'capability_need_fit': 100})
        studio, publisher = studio_population[0], studio_population[1]
        cache = SimilarityCache(max_entries=100)
        engine = MatchEngine(config=EngineConfig(pair_budget_ms=None), cache=cache)

        forward = engine.score_pair(studio, publisher, profile)
        assert cache.get_cache_stats()['misses'] == 2
        assert cache.get_cache_stats()['hits'] == 0

        # Reversing the pair reuses both ordered entries
        backward = engine.score_pair(publisher, studio, profile)
        assert cache.get_cache_stats()['misses'] == 2
        assert cache.get_cache_stats()['hits'] == 2
        assert len(cache) == 2
        assert backward.capability_need['forward'] == pytest.approx(forward.capability_need['reverse'])
        assert backward.capability_need['reverse'] == pytest.approx(forward.capability_need['forward'])
