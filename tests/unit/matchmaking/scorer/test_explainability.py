"""
Tests for match explanations.
"""
import pytest

from matchmaking.scorer.explainability import explain, reason_for
from matchmaking.scorer.models import SignalContribution
from tests import make_actor


def _contrib(signal, raw, share, reason="", included=True, **detail):
    return SignalContribution(
        signal=signal,
        raw_score=raw,
        weight=1.0,
        weighted_contribution=share,
        included=included,
        reason=reason,
        detail=detail,
    )


@pytest.fixture
def pair():
    return make_actor("a", name="Pixel Forge"), make_actor("b", name="Northstar")


class TestReasonFor:
    """Per-signal reason templates."""

    def test_shared_labels_truncated(self, pair):
        contrib = _contrib('industry_alignment', 50, 10, shared=["a", "b", "c", "d", "e"])
        assert reason_for(contrib, *pair) == "Shared industries: a, b, c (+2 more)"

    def test_no_shared_labels_no_reason(self, pair):
        assert reason_for(_contrib('platform_alignment', 0, 0, shared=[]), *pair) == ""

    def test_same_founding_year(self, pair):
        contrib = _contrib('founding_date_proximity', 99, 10, years=[2020, 2020])
        assert reason_for(contrib, *pair) == "Both founded in 2020"

    def test_numeric_reason_rounds(self, pair):
        assert reason_for(_contrib('revenue_proximity', 81.6, 10), *pair) == "Similar revenue scale (82%)"
        assert reason_for(_contrib('pitch_similarity', 44.2, 10), *pair) == "44% content similarity in pitch"

    def test_capability_need_direction(self, pair):
        forward = _contrib('capability_need_fit', 50, 10, forward_matches=["art"], reverse_matches=[])
        reverse = _contrib('capability_need_fit', 50, 10, forward_matches=[], reverse_matches=["publishing"])
        mutual = _contrib('capability_need_fit', 50, 10, forward_matches=["art"], reverse_matches=["publishing"])

        assert reason_for(forward, *pair) == "Pixel Forge offers what Northstar needs: art"
        assert reason_for(reverse, *pair) == "Northstar offers what Pixel Forge needs: publishing"
        assert reason_for(mutual, *pair).startswith("Mutual fit:")


class TestExplain:
    """Selection and ordering of reasons."""

    def test_threshold_relative_to_final_score(self):
        contributions = [
            _contrib('industry_alignment', 100, 50, "industries"),
            _contrib('platform_alignment', 100, 5, "platforms"),
            _contrib('market_alignment', 100, 4.99, "markets"),
        ]
        assert explain(contributions, 50.0) == ["industries", "platforms"]

    def test_ordered_by_contribution_then_name(self):
        contributions = [
            _contrib('technology_alignment', 100, 20, "tech"),
            _contrib('market_alignment', 100, 20, "markets"),
            _contrib('industry_alignment', 100, 30, "industries"),
        ]
        assert explain(contributions, 70.0) == ["industries", "markets", "tech"]

    def test_excluded_and_zero_contributions_skipped(self):
        contributions = [
            _contrib('industry_alignment', 0, 0, "industries"),
            _contrib('platform_alignment', 100, 30, "platforms", included=False),
            _contrib('market_alignment', 100, 30, "markets"),
        ]
        assert explain(contributions, 30.0) == ["markets"]

    def test_zero_score_has_no_reasons(self):
        assert explain([_contrib('industry_alignment', 100, 50, "industries")], 0.0) == []
