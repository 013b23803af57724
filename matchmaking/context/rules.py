#!/usr/bin/env python3
"""
Context Rule Engine - Multiplicative boosts and penalties from domain taxonomy.

Applied after the weighted average:

    final = min(100, weighted_average * multiplier)

multiplier = platform_boost * market_synergy * stage_compatibility, clamped to
[min_multiplier, max_multiplier] so one rule can neither zero nor explode a
score. Every lookup defaults to 1.0 when the table has no entry.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging

from matchmaking.models import ActorProfile
from matchmaking.profiles.models import ContextRules
from matchmaking.utils import clamp

logger = logging.getLogger(__name__)

DEFAULT_MIN_MULTIPLIER = 0.1
DEFAULT_MAX_MULTIPLIER = 3.0


@dataclass(frozen=True)
class ContextAdjustment:
    """Breakdown of the context multiplier for one pair."""
    platform_boost: float = 1.0
    market_synergy: float = 1.0
    stage_compatibility: float = 1.0
    multiplier: float = 1.0
    details: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def raw_multiplier(self) -> float:
        return self.platform_boost * self.market_synergy * self.stage_compatibility


class ContextRuleEngine:
    """Computes the bounded context multiplier for a pair of actors."""

    def __init__(
        self,
        min_multiplier: float = DEFAULT_MIN_MULTIPLIER,
        max_multiplier: float = DEFAULT_MAX_MULTIPLIER
    ):
        if not (0 < min_multiplier <= 1.0 <= max_multiplier):
            raise ValueError(
                f"Invalid multiplier bounds [{min_multiplier}, {max_multiplier}]; must contain 1.0"
            )
        self.min_multiplier = min_multiplier
        self.max_multiplier = max_multiplier

    @staticmethod
    def platform_boost(actor_a: ActorProfile, actor_b: ActorProfile, rules: ContextRules) -> Tuple[float, Optional[str]]:
        """Largest configured boost over the platforms both actors share."""
        best, best_platform = None, None
        for platform in sorted(actor_a.platforms & actor_b.platforms):
            boost = rules.platform_boosts.get(platform)
            if boost is not None and (best is None or boost > best):
                best, best_platform = boost, platform
        return (best if best is not None else 1.0), best_platform

    @staticmethod
    def market_synergy(actor_a: ActorProfile, actor_b: ActorProfile, rules: ContextRules) -> Tuple[float, Optional[Tuple[str, str]]]:
        """Best configured synergy over all market pairs, read symmetrically."""
        best, best_pair = None, None
        table = rules.market_synergies
        for market_a in sorted(actor_a.markets):
            for market_b in sorted(actor_b.markets):
                value = table.get(market_a, {}).get(market_b)
                if value is None:
                    value = table.get(market_b, {}).get(market_a)
                if value is not None and (best is None or value > best):
                    best, best_pair = value, (market_a, market_b)
        return (best if best is not None else 1.0), best_pair

    @staticmethod
    def stage_compatibility(actor_a: ActorProfile, actor_b: ActorProfile, rules: ContextRules) -> float:
        if not actor_a.stage or not actor_b.stage:
            return 1.0
        table = rules.stage_compatibility
        value = table.get(actor_a.stage, {}).get(actor_b.stage)
        if value is None:
            value = table.get(actor_b.stage, {}).get(actor_a.stage)
        return value if value is not None else 1.0

    def evaluate(self, actor_a: ActorProfile, actor_b: ActorProfile, rules: ContextRules) -> ContextAdjustment:
        platform, platform_label = self.platform_boost(actor_a, actor_b, rules)
        market, market_pair = self.market_synergy(actor_a, actor_b, rules)
        stage = self.stage_compatibility(actor_a, actor_b, rules)

        raw = platform * market * stage
        multiplier = clamp(raw, self.min_multiplier, self.max_multiplier)
        if multiplier != raw:
            logger.debug(
                f"Context multiplier for {actor_a.id}/{actor_b.id} clamped from {raw:.3f} to {multiplier:.3f}"
            )

        return ContextAdjustment(
            platform_boost=platform,
            market_synergy=market,
            stage_compatibility=stage,
            multiplier=multiplier,
            details={
                'platform': platform_label,
                'markets': list(market_pair) if market_pair else None,
                'stages': [actor_a.stage, actor_b.stage],
            },
        )

    def apply(self, weighted_average: float, adjustment: ContextAdjustment) -> float:
        """final = min(100, weighted_average * multiplier), never below 0."""
        return clamp(weighted_average * adjustment.multiplier, 0.0, 100.0)
