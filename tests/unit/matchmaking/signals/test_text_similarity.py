"""
Tests for TF-IDF text similarity over an explicit corpus.
"""
import pytest

from matchmaking.signals.text import TfidfCorpus, row_cosine
from tests import make_actor

PUZZLE_STUDIO = "Independent studio building cozy mobile puzzle games for casual players"
PUZZLE_PUBLISHER = "Global publisher of mobile puzzle games looking for casual game studios"
FINTECH = "Payments infrastructure for banks handling settlement and compliance reporting"


class TestTfidfCorpus:
    """Test suite for TfidfCorpus."""

    @pytest.fixture
    def corpus(self):
        return TfidfCorpus([PUZZLE_STUDIO, PUZZLE_PUBLISHER, FINTECH, "hi"])

    def test_short_documents_not_fitted(self, corpus):
        assert corpus.size == 3
        assert not corpus.is_eligible("hi")
        assert corpus.is_eligible(PUZZLE_STUDIO)

    def test_stop_words_do_not_count_as_tokens(self, corpus):
        assert corpus.token_count("the and of it") == 0

    def test_identical_text_scores_100(self, corpus):
        assert corpus.similarity(PUZZLE_STUDIO, PUZZLE_STUDIO) == pytest.approx(100.0)

    def test_related_texts_score_higher_than_unrelated(self, corpus):
        related = corpus.similarity(PUZZLE_STUDIO, PUZZLE_PUBLISHER)
        unrelated = corpus.similarity(PUZZLE_STUDIO, FINTECH)
        assert 0.0 < related <= 100.0
        assert unrelated == pytest.approx(0.0)
        assert related > unrelated

    def test_symmetric(self, corpus):
        assert corpus.similarity(PUZZLE_STUDIO, PUZZLE_PUBLISHER) == pytest.approx(
            corpus.similarity(PUZZLE_PUBLISHER, PUZZLE_STUDIO)
        )

    def test_ineligible_text_excluded(self, corpus):
        assert corpus.similarity(PUZZLE_STUDIO, "hi") is None
        assert corpus.similarity("", PUZZLE_STUDIO) is None

    def test_empty_corpus(self):
        corpus = TfidfCorpus(["", "ok"])
        assert corpus.is_empty
        assert corpus.similarity(PUZZLE_STUDIO, PUZZLE_STUDIO) is None
        assert len(corpus.vectorize([make_actor("a", pitch=PUZZLE_STUDIO)])) == 0

    def test_fingerprint_ignores_document_order(self):
        first = TfidfCorpus([PUZZLE_STUDIO, FINTECH])
        second = TfidfCorpus([FINTECH, PUZZLE_STUDIO])
        third = TfidfCorpus([FINTECH, PUZZLE_PUBLISHER])
        assert first.fingerprint == second.fingerprint
        assert first.fingerprint != third.fingerprint

    def test_batch_vectors_match_direct_similarity(self, corpus):
        a = make_actor("a", pitch=PUZZLE_STUDIO)
        b = make_actor("b", pitch=PUZZLE_PUBLISHER)
        c = make_actor("c", pitch="hi")

        vectors = corpus.vectorize([a, b, c])

        assert "a" in vectors and "b" in vectors
        assert "c" not in vectors
        assert row_cosine(vectors.get("a"), vectors.get("b")) == pytest.approx(
            corpus.similarity(a.text, b.text)
        )

    def test_from_actors_uses_pitch_and_looking_for(self):
        actor = make_actor("a", pitch="cozy puzzle games", looking_for="publishing partners worldwide")
        corpus = TfidfCorpus.from_actors([actor])
        assert corpus.size == 1
        assert actor.text == "cozy puzzle games publishing partners worldwide"
