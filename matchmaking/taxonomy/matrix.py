#!/usr/bin/env python3
"""
Taxonomy Matrix Builder - Capability x need aggregates over an actor population.

matrix[i][j] is the weighted number of ordered actor pairs (X, Y), X != Y,
where X offers capability i and Y seeks need j. Weights follow the bipartite
signal: 1.0 for an exact label match, 0.5 for substring containment, 0 otherwise.
Self-pairs (an actor's own capability against its own need) are counted in
`self_matrix` instead.

Counting works on per-label actor counts rather than actor pairs:

    cross[c, n] = w(c, n) * (cap_count[c] * need_count[n] - both[c, n])
    self[c, n]  = w(c, n) * both[c, n]

where both[c, n] is the number of actors listing c as a capability and n as a
need. Cost is O(labels^2 + actors * labels) and never touches actor pairs.

The graph part (nodes and edges) comes from MatchEngine.score_all_pairs:
edge weight is the pairwise match score and node size is the number of edges
at or above `min_edge_score`.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from matchmaking.models import ActorProfile
from matchmaking.profiles.models import WeightProfile
from matchmaking.profiles.store import default_profiles
from matchmaking.scorer.engine import MatchEngine
from matchmaking.signals.bipartite import label_match_weight
from matchmaking.utils import to_native_types

logger = logging.getLogger(__name__)

DEFAULT_MIN_EDGE_SCORE = 40.0
DEFAULT_PROFILE_NAME = "general"
TOP_VALUES = 20
EXAMPLE_ACTORS = 5

CORRELATION_DIMENSIONS = ('industries', 'platforms', 'technologies', 'markets', 'capabilities', 'needs')
CORRELATION_MIN_JACCARD = 0.1
CORRELATION_TOP_PAIRS = 10
CORRELATION_EXAMPLES = 3
SIGNIFICANT_STRENGTH = 0.3

# Accepted dimension names, singular aliases included
DIMENSION_FIELDS: Dict[str, str] = {
    'industries': 'industries', 'industry': 'industries',
    'platforms': 'platforms', 'platform': 'platforms',
    'markets': 'markets', 'market': 'markets',
    'technologies': 'technologies', 'technology': 'technologies',
    'capabilities': 'capabilities', 'capability': 'capabilities',
    'needs': 'needs', 'need': 'needs',
    'stage': 'stage',
    'actor_type': 'actor_type', 'type': 'actor_type',
}


@dataclass
class TaxonomyMatrix:
    """Dense capability x need matrices plus a sparse actor graph."""
    matrix: np.ndarray
    self_matrix: np.ndarray
    row_labels: List[str]
    col_labels: List[str]
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    edges: List[Dict[str, Any]] = field(default_factory=list)
    actor_count: int = 0

    def cell(self, capability: str, need: str) -> float:
        return float(self.matrix[self.row_labels.index(capability), self.col_labels.index(need)])

    def to_dict(self) -> Dict[str, Any]:
        return to_native_types({
            'matrix': self.matrix,
            'self_matrix': self.self_matrix,
            'row_labels': self.row_labels,
            'col_labels': self.col_labels,
            'nodes': self.nodes,
            'edges': self.edges,
            'actor_count': self.actor_count,
        })


def _dimension_field(dimension: str) -> str:
    try:
        return DIMENSION_FIELDS[dimension.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown dimension {dimension!r}; expected one of {sorted(set(DIMENSION_FIELDS.values()))}"
        ) from None


def _dimension_values(actor: ActorProfile, field_name: str) -> List[str]:
    value = getattr(actor, field_name)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return [value] if value else []


def _consenting(actors: Iterable[ActorProfile]) -> List[ActorProfile]:
    seen = {}
    for actor in actors:
        if actor.consent and actor.id not in seen:
            seen[actor.id] = actor
    return [seen[k] for k in sorted(seen)]


def _incidence(actors: List[ActorProfile], field_name: str, labels: List[str]) -> np.ndarray:
    """Binary actor x label matrix."""
    index = {label: i for i, label in enumerate(labels)}
    result = np.zeros((len(actors), len(labels)), dtype=np.float64)
    for row, actor in enumerate(actors):
        for label in getattr(actor, field_name):
            result[row, index[label]] = 1.0
    return result


def label_weight_matrix(row_labels: List[str], col_labels: List[str]) -> np.ndarray:
    weights = np.zeros((len(row_labels), len(col_labels)), dtype=np.float64)
    for i, cap in enumerate(row_labels):
        for j, need in enumerate(col_labels):
            weights[i, j] = label_match_weight(cap, need)
    return weights


class TaxonomyMatrixBuilder:
    """Builds TaxonomyMatrix outputs for a population of actors."""

    def __init__(
        self,
        engine: Optional[MatchEngine] = None,
        min_edge_score: float = DEFAULT_MIN_EDGE_SCORE,
        default_profile: Optional[WeightProfile] = None
    ):
        self.engine = engine or MatchEngine()
        self.min_edge_score = min_edge_score
        self.default_profile = default_profile

    def _profile(self, profile: Optional[WeightProfile]) -> WeightProfile:
        if profile is not None:
            return profile
        if self.default_profile is None:
            self.default_profile = next(
                p for p in default_profiles() if p.name == DEFAULT_PROFILE_NAME
            )
        return self.default_profile

    def count_matrices(self, actors: List[ActorProfile]):
        """
        Cross-actor and self-pair capability x need matrices.

        Returns:
            (matrix, self_matrix, row_labels, col_labels)
        """
        row_labels = sorted({c for a in actors for c in a.capabilities})
        col_labels = sorted({n for a in actors for n in a.needs})

        caps = _incidence(actors, 'capabilities', row_labels)
        needs = _incidence(actors, 'needs', col_labels)
        weights = label_weight_matrix(row_labels, col_labels)

        both = caps.T @ needs
        pair_counts = np.outer(caps.sum(axis=0), needs.sum(axis=0))

        matrix = weights * (pair_counts - both)
        self_matrix = weights * both
        return matrix, self_matrix, row_labels, col_labels

    def build(
        self,
        actors: Iterable[ActorProfile],
        profile: Optional[WeightProfile] = None,
        include_graph: bool = True,
        cancel_event=None
    ) -> TaxonomyMatrix:
        """
        Build the matrices and, optionally, the actor graph.

        Non-consenting actors are left out of every count and of the graph.
        """
        population = _consenting(actors)
        matrix, self_matrix, row_labels, col_labels = self.count_matrices(population)

        nodes: List[Dict[str, Any]] = []
        edges: List[Dict[str, Any]] = []
        if include_graph:
            batch = self.engine.score_all_pairs(
                population, self._profile(profile),
                min_score=self.min_edge_score, cancel_event=cancel_event
            )
            degree = {actor.id: 0 for actor in population}
            for match in batch.matches:
                edges.append({
                    'source': match.actor_a_id,
                    'target': match.actor_b_id,
                    'weight': round(match.score, 2),
                })
                degree[match.actor_a_id] += 1
                degree[match.actor_b_id] += 1
            edges.sort(key=lambda e: (-e['weight'], e['source'], e['target']))
            nodes = [
                {
                    'id': actor.id,
                    'label': actor.name or actor.id,
                    'type': actor.actor_type,
                    'size': degree[actor.id],
                }
                for actor in population
            ]

        logger.info(
            f"Built taxonomy matrix {len(row_labels)}x{len(col_labels)} for {len(population)} actors "
            f"({len(edges)} edges >= {self.min_edge_score})"
        )
        return TaxonomyMatrix(
            matrix=matrix,
            self_matrix=self_matrix,
            row_labels=row_labels,
            col_labels=col_labels,
            nodes=nodes,
            edges=edges,
            actor_count=len(population),
        )


def build_taxonomy_matrix(
    actors: Iterable[ActorProfile],
    profile: Optional[WeightProfile] = None,
    engine: Optional[MatchEngine] = None,
    min_edge_score: float = DEFAULT_MIN_EDGE_SCORE
) -> TaxonomyMatrix:
    return TaxonomyMatrixBuilder(engine=engine, min_edge_score=min_edge_score).build(actors, profile)


def dimension_distribution(actors: Iterable[ActorProfile], dimension: str) -> Dict[str, Any]:
    """
    Frequency of each value of a dimension across consenting actors.

    Values are ranked by count desc, then value asc. The top values are
    returned separately from the long tail.
    """
    field_name = _dimension_field(dimension)
    population = _consenting(actors)

    holders: Dict[str, List[ActorProfile]] = {}
    for actor in population:
        for value in _dimension_values(actor, field_name):
            holders.setdefault(value, []).append(actor)

    ranked = sorted(holders.items(), key=lambda item: (-len(item[1]), item[0]))
    data = [
        {
            'rank': rank,
            'value': value,
            'count': len(members),
            'percentage': 100.0 * len(members) / len(population),
            'actors': [{'id': a.id, 'name': a.name, 'type': a.actor_type} for a in members[:EXAMPLE_ACTORS]],
        }
        for rank, (value, members) in enumerate(ranked, start=1)
    ]

    counts = np.array([entry['count'] for entry in data], dtype=np.float64)
    if counts.size:
        statistics = {
            'total_values': int(counts.size),
            'total_occurrences': int(counts.sum()),
            'mean': round(float(counts.mean()), 2),
            'median': float(np.median(counts)),
            'max': int(counts.max()),
            'min': int(counts.min()),
            'range': int(counts.max() - counts.min()),
        }
    else:
        statistics = {
            'total_values': 0, 'total_occurrences': 0, 'mean': 0.0,
            'median': 0.0, 'max': 0, 'min': 0, 'range': 0,
        }

    return {
        'dimension': field_name,
        'actor_count': len(population),
        'data': data,
        'statistics': statistics,
        'top_values': data[:TOP_VALUES],
        'long_tail': data[TOP_VALUES:],
    }


def dimension_coverage(actors: Iterable[ActorProfile], dimension: str) -> float:
    """Percentage of consenting actors with at least one value for the dimension."""
    field_name = _dimension_field(dimension)
    population = _consenting(actors)
    if not population:
        return 0.0
    with_data = sum(1 for actor in population if _dimension_values(actor, field_name))
    return 100.0 * with_data / len(population)


def _value_incidence(population: List[ActorProfile], field_name: str):
    """Sorted dimension values and the binary actor x value matrix."""
    labels = sorted({v for actor in population for v in _dimension_values(actor, field_name)})
    index = {label: i for i, label in enumerate(labels)}
    result = np.zeros((len(population), len(labels)), dtype=np.float64)
    for row, actor in enumerate(population):
        for value in _dimension_values(actor, field_name):
            result[row, index[value]] = 1.0
    return labels, result


def dimension_cooccurrence(actors: Iterable[ActorProfile], dimension: str) -> Dict[str, Any]:
    """
    Heatmap of how often two values of one dimension are held by the same actor.

    matrix[i][j] counts consenting actors holding both value i and value j; the
    diagonal is the plain per-value count. percentage scales every cell by the
    largest cell.
    """
    field_name = _dimension_field(dimension)
    population = _consenting(actors)
    labels, incidence = _value_incidence(population, field_name)

    matrix = incidence.T @ incidence
    max_value = float(matrix.max()) if matrix.size else 0.0
    percentage = matrix * (100.0 / max_value) if max_value > 0 else np.zeros_like(matrix)

    return to_native_types({
        'dimension': field_name,
        'labels': labels,
        'matrix': matrix.astype(np.int64),
        'percentage': percentage,
        'max_value': int(max_value),
        'actor_count': len(population),
    })


def _pair_correlation(
    population: List[ActorProfile], primary: str, secondary: str
) -> Optional[Dict[str, Any]]:
    labels_a, inc_a = _value_incidence(population, primary)
    labels_b, inc_b = _value_incidence(population, secondary)
    if len(labels_a) < 2 or len(labels_b) < 2:
        return None

    shared = inc_a.T @ inc_b
    union = inc_a.sum(axis=0)[:, None] + inc_b.sum(axis=0)[None, :] - shared
    jaccard = np.divide(shared, union, out=np.zeros_like(shared), where=union > 0)

    pairs = []
    for i, j in zip(*np.nonzero(jaccard > CORRELATION_MIN_JACCARD)):
        members = np.nonzero(inc_a[:, i] * inc_b[:, j])[0]
        pairs.append({
            'value1': labels_a[i],
            'value2': labels_b[j],
            'jaccard': float(jaccard[i, j]),
            'shared_actors': int(shared[i, j]),
            'value1_count': int(inc_a[:, i].sum()),
            'value2_count': int(inc_b[:, j].sum()),
            'examples': [
                {'id': population[k].id, 'name': population[k].name}
                for k in members[:CORRELATION_EXAMPLES]
            ],
        })

    strength = float(np.mean([p['jaccard'] for p in pairs])) if pairs else 0.0
    pairs.sort(key=lambda p: (-p['jaccard'], p['value1'], p['value2']))
    return {
        'dimension': secondary,
        'strength': strength,
        'significant_pairs': pairs[:CORRELATION_TOP_PAIRS],
        'total_pairs': len(pairs),
    }


def dimension_correlation(actors: Iterable[ActorProfile], primary: str) -> Dict[str, Any]:
    """
    How strongly the values of one dimension go together with each other dimension.

    For every (primary value, secondary value) pair the Jaccard index of their
    actor sets is computed; pairs above 0.1 are kept. A secondary dimension's
    strength is the mean Jaccard of its kept pairs. Dimensions where either side
    has fewer than two distinct values are skipped.
    """
    field_name = _dimension_field(primary)
    population = _consenting(actors)

    correlations = []
    for secondary in CORRELATION_DIMENSIONS:
        if secondary == field_name:
            continue
        result = _pair_correlation(population, field_name, secondary)
        if result is not None:
            correlations.append(result)
    correlations.sort(key=lambda c: (-c['strength'], c['dimension']))

    return {
        'primary_dimension': field_name,
        'actor_count': len(population),
        'correlations': correlations,
        'significant_correlations': [c for c in correlations if c['strength'] > SIGNIFICANT_STRENGTH],
    }
