"""Profiles Module - Weight profiles, persona templates and the profile store."""
from matchmaking.profiles.models import WeightProfile, ContextRules, ProfileThresholds
from matchmaking.profiles.store import (
    InMemoryWeightProfileStore,
    build_profile,
    default_profiles,
    load_weight_profiles,
)

__all__ = [
    'WeightProfile', 'ContextRules', 'ProfileThresholds',
    'InMemoryWeightProfileStore', 'build_profile', 'default_profiles', 'load_weight_profiles'
]
