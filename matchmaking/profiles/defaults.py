"""Built-in persona weight profiles and default context rules."""
from typing import Any, Dict, List

DEFAULT_PLATFORM_BOOSTS: Dict[str, float] = {
    'mobile': 1.2,
    'pc': 1.1,
    'console': 1.3,
    'vr': 1.4,
    'web': 1.0,
}

DEFAULT_MARKET_SYNERGIES: Dict[str, Dict[str, float]] = {
    'b2b': {'b2b': 1.0, 'b2c': 0.7},
    'b2c': {'b2b': 0.7, 'b2c': 1.0},
}

DEFAULT_STAGE_COMPATIBILITY: Dict[str, Dict[str, float]] = {
    'idea': {'idea': 1.0, 'prototype': 0.9, 'alpha': 0.7},
    'prototype': {'idea': 0.9, 'prototype': 1.0, 'alpha': 0.9, 'beta': 0.8},
    'alpha': {'prototype': 0.9, 'alpha': 1.0, 'beta': 0.9, 'launched': 0.7},
    'beta': {'alpha': 0.9, 'beta': 1.0, 'launched': 0.9, 'growth': 0.8},
    'launched': {'beta': 0.7, 'launched': 1.0, 'growth': 0.9, 'mature': 0.8},
    'growth': {'launched': 0.9, 'growth': 1.0, 'mature': 0.9},
    'mature': {'growth': 0.9, 'mature': 1.0},
}

DEFAULT_CONTEXT_RULES: Dict[str, Any] = {
    'platform_boosts': DEFAULT_PLATFORM_BOOSTS,
    'market_synergies': DEFAULT_MARKET_SYNERGIES,
    'stage_compatibility': DEFAULT_STAGE_COMPATIBILITY,
}

# Persona templates. Weights are relative importances in [0, 100].
PERSONA_TEMPLATES: List[Dict[str, Any]] = [
    {
        'name': 'general',
        'persona': 'general',
        'description': 'Balanced weighting for mixed networking events',
        'weights': {
            'founding_date_proximity': 10,
            'industry_alignment': 40,
            'platform_alignment': 40,
            'market_alignment': 30,
            'technology_alignment': 20,
            'revenue_proximity': 10,
            'employee_count_proximity': 10,
            'funding_proximity': 10,
            'name_similarity': 2,
            'pitch_similarity': 30,
            'capability_need_fit': 60,
        },
        'thresholds': {'min_overall_score': 40, 'min_confidence': 30, 'max_results': 100},
    },
    {
        'name': 'investor',
        'persona': 'investor',
        'description': 'Investors looking for portfolio fit: market, traction and stage',
        'weights': {
            'founding_date_proximity': 5,
            'industry_alignment': 40,
            'market_alignment': 60,
            'revenue_proximity': 40,
            'funding_proximity': 40,
            'pitch_similarity': 30,
            'capability_need_fit': 40,
        },
        'thresholds': {'min_overall_score': 45, 'min_confidence': 40, 'max_results': 50},
    },
    {
        'name': 'developer',
        'persona': 'developer',
        'description': 'Developers looking for publishers, tooling and technology partners',
        'weights': {
            'industry_alignment': 30,
            'platform_alignment': 60,
            'technology_alignment': 50,
            'employee_count_proximity': 10,
            'pitch_similarity': 30,
            'capability_need_fit': 80,
        },
        'thresholds': {'min_overall_score': 40, 'min_confidence': 30, 'max_results': 100},
    },
    {
        'name': 'publisher',
        'persona': 'publisher',
        'description': 'Publishers scouting developers by platform and market reach',
        'weights': {
            'industry_alignment': 40,
            'platform_alignment': 60,
            'market_alignment': 40,
            'pitch_similarity': 20,
            'capability_need_fit': 80,
        },
        'thresholds': {'min_overall_score': 50, 'min_confidence': 30, 'max_results': 75},
    },
]
