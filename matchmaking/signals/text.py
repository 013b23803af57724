#!/usr/bin/env python3
"""
Text Similarity - TF-IDF cosine over an explicit corpus.

The corpus is a parameter, never global state: callers build a TfidfCorpus
from the actor texts in scope for one matching request, score with it, and
drop it. Vectors computed for a batch live in a TextVectors mapping that is
discarded with the batch.
"""

import logging
from typing import Dict, Iterable, Optional

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from matchmaking.utils import FingerprintGenerator

logger = logging.getLogger(__name__)

DEFAULT_MIN_TOKENS = 3


def _make_vectorizer() -> TfidfVectorizer:
    return TfidfVectorizer(stop_words="english", lowercase=True)


class TextVectors:
    """TF-IDF rows for one batch of actors, keyed by actor id."""

    def __init__(self, rows: Dict[str, object]):
        self._rows = rows

    def get(self, actor_id: str):
        return self._rows.get(actor_id)

    def __contains__(self, actor_id: str) -> bool:
        return actor_id in self._rows

    def __len__(self) -> int:
        return len(self._rows)


class TfidfCorpus:
    """
    TF-IDF model fitted on the documents of one matching request.

    Documents with fewer than `min_tokens` analyzer tokens (after stop-word
    removal) are treated as absent: they are not fitted and never scored.
    """

    def __init__(self, documents: Iterable[str], min_tokens: int = DEFAULT_MIN_TOKENS):
        self.min_tokens = min_tokens
        self._analyzer = _make_vectorizer().build_analyzer()

        eligible = [doc for doc in documents if self.is_eligible(doc)]
        self.size = len(eligible)
        self.fingerprint = FingerprintGenerator.generate(
            {'min_tokens': min_tokens, 'documents': sorted(eligible)}
        )

        self._vectorizer: Optional[TfidfVectorizer] = None
        if eligible:
            self._vectorizer = _make_vectorizer()
            self._vectorizer.fit(eligible)
            logger.debug(
                f"Fitted TF-IDF corpus on {self.size} documents "
                f"({len(self._vectorizer.vocabulary_)} terms)"
            )
        else:
            logger.debug("TF-IDF corpus has no eligible documents")

    @classmethod
    def from_actors(cls, actors: Iterable, min_tokens: int = DEFAULT_MIN_TOKENS) -> "TfidfCorpus":
        return cls((actor.text for actor in actors), min_tokens=min_tokens)

    @property
    def is_empty(self) -> bool:
        return self._vectorizer is None

    def token_count(self, text: str) -> int:
        if not text:
            return 0
        return len(self._analyzer(text))

    def is_eligible(self, text: str) -> bool:
        return self.token_count(text) >= self.min_tokens

    def vectorize(self, actors: Iterable) -> TextVectors:
        """Compute TF-IDF rows for the eligible actors of one batch."""
        if self._vectorizer is None:
            return TextVectors({})
        eligible = [a for a in actors if self.is_eligible(a.text)]
        if not eligible:
            return TextVectors({})
        matrix = self._vectorizer.transform([a.text for a in eligible])
        return TextVectors({a.id: matrix[i] for i, a in enumerate(eligible)})

    def similarity(self, text_a: str, text_b: str) -> Optional[float]:
        """
        Cosine similarity of two texts scaled to [0, 100].

        Returns None if either text is below the token threshold or the
        corpus is empty.
        """
        if self._vectorizer is None:
            return None
        if not self.is_eligible(text_a) or not self.is_eligible(text_b):
            return None
        rows = self._vectorizer.transform([text_a, text_b])
        return row_cosine(rows[0], rows[1])


def row_cosine(row_a, row_b) -> float:
    """Cosine of two TF-IDF rows scaled to [0, 100]."""
    cos = float(cosine_similarity(row_a, row_b)[0, 0])
    return 100.0 * max(0.0, min(1.0, cos))
