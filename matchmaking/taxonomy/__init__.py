"""Taxonomy Module - Capability x need matrices and actor graphs for visualization."""
from matchmaking.taxonomy.matrix import (
    TaxonomyMatrix,
    TaxonomyMatrixBuilder,
    build_taxonomy_matrix,
    dimension_cooccurrence,
    dimension_correlation,
    dimension_coverage,
    dimension_distribution,
)

__all__ = [
    'TaxonomyMatrix', 'TaxonomyMatrixBuilder', 'build_taxonomy_matrix',
    'dimension_cooccurrence', 'dimension_correlation', 'dimension_coverage', 'dimension_distribution'
]
