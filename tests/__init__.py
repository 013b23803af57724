#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the slower all-pairs tests
    python -m pytest tests/ -v -m "not slow"

    # Using unittest (TestCase-based modules only)
    python -m unittest discover tests -v

No external services are needed: Redis is always mocked.
"""

from typing import Any, Dict, Optional

from matchmaking.models import ActorProfile
from matchmaking.profiles.models import ContextRules, WeightProfile


def make_actor(actor_id: str, consent: bool = True, **fields: Any) -> ActorProfile:
    """Build a consenting ActorProfile with only the given fields set."""
    fields.setdefault('name', actor_id)
    return ActorProfile(id=actor_id, consent=consent, **fields)


def make_profile(
    weights: Dict[str, float],
    name: str = "test",
    context_rules: Optional[Dict[str, Any]] = None,
    **kwargs: Any
) -> WeightProfile:
    """Build a WeightProfile with neutral (empty) context rules unless given."""
    return WeightProfile(
        name=name,
        weights=weights,
        context_rules=ContextRules(**(context_rules or {})),
        **kwargs
    )
