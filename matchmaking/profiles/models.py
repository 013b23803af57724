#!/usr/bin/env python3
"""
Weight Profile Models - Named, validated signal weightings.

A WeightProfile is an immutable value object. It is validated when it is
built (unknown signal names and out-of-range weights are rejected), so a bad
profile can never reach the scorer. Weight and context-rule tables are
read-only mappings; use with_weights() to derive a changed profile.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from matchmaking.signals.registry import SIGNAL_NAMES

MIN_WEIGHT = 0.0
MAX_WEIGHT = 100.0


def _lower_keys(table: Mapping[str, float]) -> Dict[str, float]:
    return {str(k).strip().lower(): v for k, v in table.items()}


def _check_multiplier(label: str, value: float) -> float:
    value = float(value)
    if value <= 0:
        raise ValueError(f"Multiplier for {label!r} must be positive, got {value}")
    return value


class ContextRules(BaseModel):
    """
    Multiplicative context tables applied after weighted averaging.

    - platform_boosts: platform -> multiplier, applied when both actors share the platform
    - market_synergies: marketA -> {marketB -> multiplier}, read symmetrically
    - stage_compatibility: stageA -> {stageB -> multiplier}
    """
    model_config = ConfigDict(frozen=True, validate_default=True)

    platform_boosts: Mapping[str, float] = Field(default_factory=dict)
    market_synergies: Mapping[str, Mapping[str, float]] = Field(default_factory=dict)
    stage_compatibility: Mapping[str, Mapping[str, float]] = Field(default_factory=dict)

    @field_validator('platform_boosts')
    @classmethod
    def _validate_boosts(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType({k: _check_multiplier(k, m) for k, m in _lower_keys(v).items()})

    @field_validator('market_synergies', 'stage_compatibility')
    @classmethod
    def _validate_matrix(cls, v: Mapping[str, Mapping[str, float]]) -> Mapping[str, Mapping[str, float]]:
        return MappingProxyType({
            row: MappingProxyType({col: _check_multiplier(f"{row}/{col}", m) for col, m in _lower_keys(cols).items()})
            for row, cols in _lower_keys(v).items()
        })

    @field_serializer('platform_boosts')
    def _dump_boosts(self, v: Mapping[str, float]) -> Dict[str, float]:
        return dict(v)

    @field_serializer('market_synergies', 'stage_compatibility')
    def _dump_matrix(self, v: Mapping[str, Mapping[str, float]]) -> Dict[str, Dict[str, float]]:
        return {row: dict(cols) for row, cols in v.items()}


class ProfileThresholds(BaseModel):
    """Default ranking options for requests made with this profile."""
    model_config = ConfigDict(frozen=True)

    min_overall_score: float = Field(default=0.0, ge=0.0, le=100.0)
    min_confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    max_results: int = Field(default=100, ge=1, le=1000)


class WeightProfile(BaseModel):
    """
    Named weighting of signals plus context rules, selected per persona.

    weights maps signal name -> weight in [0, 100]. A weight of 0 disables the
    signal and removes it from the confidence denominator.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    persona: str = "general"
    description: str = ""
    weights: Mapping[str, float]
    context_rules: ContextRules = Field(default_factory=ContextRules)
    thresholds: ProfileThresholds = Field(default_factory=ProfileThresholds)
    is_default: bool = False

    @field_validator('weights')
    @classmethod
    def _validate_weights(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        errors: List[str] = []
        for key, value in v.items():
            if key not in SIGNAL_NAMES:
                errors.append(f"Unknown signal '{key}'")
                continue
            if not (MIN_WEIGHT <= value <= MAX_WEIGHT):
                errors.append(f"Weight '{key}' must be a number between 0 and 100")
        if errors:
            raise ValueError(", ".join(errors))
        return MappingProxyType({k: float(val) for k, val in v.items()})

    @field_serializer('weights')
    def _dump_weights(self, v: Mapping[str, float]) -> Dict[str, float]:
        return dict(v)

    def configured_signals(self) -> List[str]:
        """Signals with weight > 0, in registry order."""
        return [name for name in SIGNAL_NAMES if self.weights.get(name, 0.0) > 0]

    def weight(self, signal: str) -> float:
        return self.weights.get(signal, 0.0)

    def with_weights(self, name: str, adjustments: Dict[str, float], description: Optional[str] = None) -> "WeightProfile":
        """Return a validated copy with some weights replaced."""
        data = self.model_dump()
        data.update(
            name=name,
            weights={**self.weights, **adjustments},
            description=description if description is not None else self.description,
            is_default=False,
        )
        return WeightProfile.model_validate(data)
