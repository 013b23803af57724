#!/usr/bin/env python3
"""
Signal Base Types - Outcomes, budgets and the two signal kinds.

Every signal produces a raw score in [0, 100] plus an `included` flag. A signal
whose input is missing on either actor returns `SignalOutcome.excluded()` and
is left out of the weighted average's denominator.

Directionality is part of the type: a SymmetricSignal computes one value for an
unordered pair, a DirectionalSignal computes one value per direction and hands
back a DirectionalScore whose only combinator is the mean.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, TYPE_CHECKING

from matchmaking.exceptions import SignalTimeout

if TYPE_CHECKING:
    from matchmaking.models import ActorProfile
    from matchmaking.signals.text import TfidfCorpus, TextVectors


class SignalKind(str, Enum):
    SYMMETRIC = "symmetric"
    DIRECTIONAL = "directional"


@dataclass(frozen=True)
class SignalOutcome:
    """Raw result of one signal for one (ordered or unordered) pair."""
    score: float
    included: bool
    detail: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def excluded(cls, reason: str = "missing_input") -> "SignalOutcome":
        return cls(score=0.0, included=False, detail={'excluded': reason})


@dataclass(frozen=True)
class DirectionalScore:
    """
    Per-direction values of a directional signal.

    forward = A offers / B seeks, reverse = B offers / A seeks.
    """
    forward: SignalOutcome
    reverse: SignalOutcome

    @property
    def included(self) -> bool:
        return self.forward.included or self.reverse.included

    def combined(self) -> SignalOutcome:
        """Mean of the directions that had data. Never a sum."""
        parts = [o.score for o in (self.forward, self.reverse) if o.included]
        if not parts:
            return SignalOutcome.excluded()
        return SignalOutcome(
            score=sum(parts) / len(parts),
            included=True,
            detail={
                'forward': self.forward.score if self.forward.included else None,
                'reverse': self.reverse.score if self.reverse.included else None,
                'forward_matches': self.forward.detail.get('matches', []),
                'reverse_matches': self.reverse.detail.get('matches', []),
            },
        )


class PairBudget:
    """
    Cooperative time budget for scoring one pair.

    Signals call `check()` before starting and, for long-running loops, while
    running. Once the deadline passes, `check()` raises SignalTimeout.
    """

    def __init__(self, budget_ms: Optional[float]):
        self.budget_ms = budget_ms
        self.started = time.monotonic()
        self.deadline = None if budget_ms is None else self.started + budget_ms / 1000.0

    @classmethod
    def unlimited(cls) -> "PairBudget":
        return cls(None)

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started) * 1000.0

    def check(self, signal: str) -> None:
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise SignalTimeout(signal, self.elapsed_ms(), self.budget_ms)


@dataclass
class SignalContext:
    """Per-request inputs shared by all signals of one pair computation."""
    budget: PairBudget
    corpus: Optional["TfidfCorpus"] = None
    text_vectors: Optional["TextVectors"] = None
    date_decay_days: float = 730.0


@dataclass(frozen=True)
class SymmetricSignal:
    """A signal where signal(A, B) == signal(B, A)."""
    name: str
    family: str
    fields: Tuple[str, ...]
    compute: Callable[["ActorProfile", "ActorProfile", SignalContext], SignalOutcome]
    kind: SignalKind = SignalKind.SYMMETRIC
    # Extra cache-key component for results that depend on request inputs
    scope: Optional[Callable[[SignalContext], str]] = None


DirectionRunner = Callable[["ActorProfile", "ActorProfile", Callable[[], SignalOutcome]], SignalOutcome]


@dataclass(frozen=True)
class DirectionalSignal:
    """
    A signal evaluated per direction.

    `compute_direction(offering, seeking, ctx)` scores what `offering` provides
    against what `seeking` wants. Callers obtain both directions through
    `evaluate` and must combine them with DirectionalScore.combined().

    `run(offering, seeking, compute)`, when given, wraps each direction's
    computation, e.g. to look it up in a cache first.
    """
    name: str
    family: str
    fields: Tuple[str, ...]
    compute_direction: Callable[["ActorProfile", "ActorProfile", SignalContext], SignalOutcome]
    kind: SignalKind = SignalKind.DIRECTIONAL
    scope: Optional[Callable[[SignalContext], str]] = None

    def evaluate(
        self,
        actor_a: "ActorProfile",
        actor_b: "ActorProfile",
        ctx: SignalContext,
        run: Optional[DirectionRunner] = None
    ) -> DirectionalScore:
        def direction(offering: "ActorProfile", seeking: "ActorProfile") -> SignalOutcome:
            def compute() -> SignalOutcome:
                return self.compute_direction(offering, seeking, ctx)
            return compute() if run is None else run(offering, seeking, compute)

        return DirectionalScore(forward=direction(actor_a, actor_b), reverse=direction(actor_b, actor_a))
