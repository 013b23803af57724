"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

from datetime import date

import pytest

from matchmaking.config_loader import EngineConfig
from matchmaking.scorer.engine import MatchEngine
from tests import make_actor, make_profile


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "redis: marks tests that talk to a mocked Redis client"
    )


@pytest.fixture
def engine():
    """Engine without a pair budget, so slow CI machines never time out signals."""
    return MatchEngine(config=EngineConfig(pair_budget_ms=None, max_workers=4, batch_size=4))


@pytest.fixture
def industry_date_profile():
    """industries weight 80, founding date weight 20, no context rules."""
    return make_profile({'industry_alignment': 80, 'founding_date_proximity': 20}, name="industry-date")


@pytest.fixture
def studio_population():
    """A small gaming population with capabilities, needs and pitches."""
    return [
        make_actor(
            "studio-a", name="Pixel Forge",
            industries=["gaming", "mobile"], platforms=["ios", "android"],
            markets=["b2c"], technologies=["unity"], founded=date(2020, 1, 1),
            employee_count=25, revenue=2_000_000, stage="launched",
            capabilities=["game development", "art"], needs=["publishing", "funding"],
            pitch="Independent studio building cozy mobile puzzle games for casual players",
        ),
        make_actor(
            "publisher-b", name="Northstar Publishing",
            industries=["gaming"], platforms=["ios", "pc"], markets=["b2c"],
            technologies=["unity", "unreal"], founded=date(2012, 6, 1),
            employee_count=120, revenue=30_000_000, stage="mature",
            capabilities=["publishing", "marketing"], needs=["game development"],
            pitch="Global publisher of mobile and pc games looking for puzzle game studios",
        ),
        make_actor(
            "investor-c", name="Seedling Ventures", actor_type="investor",
            industries=["gaming", "fintech"], markets=["b2b", "b2c"],
            founded=date(2018, 3, 1), employee_count=8, stage="growth",
            capabilities=["funding"], needs=["deal flow"],
            pitch="Seed fund investing in early gaming studios and consumer apps",
        ),
        make_actor(
            "hidden-d", consent=False, name="Stealth Co",
            industries=["gaming"], capabilities=["art"], needs=["publishing"],
        ),
    ]
