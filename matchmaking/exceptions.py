#!/usr/bin/env python3
"""
Exceptions raised by the matchmaking engine.

Input errors (unknown ids, consent violations) and configuration errors
(malformed weight profiles) always propagate to the caller. SignalTimeout is
raised inside a single signal computation and handled by the engine, which
excludes that signal instead of failing the match.
"""

from typing import List, Optional


class MatchmakingException(Exception):
    """Base exception for matchmaking errors."""
    pass


class ConsentViolation(MatchmakingException):
    """Raised when a non-consenting actor is passed into a match computation."""

    def __init__(self, actor_id: str):
        self.actor_id = actor_id
        super().__init__(f"Actor {actor_id!r} has not consented to matchmaking")


class ActorNotFound(MatchmakingException):
    """Raised when an actor id cannot be resolved."""

    def __init__(self, actor_id: str):
        self.actor_id = actor_id
        super().__init__(f"Actor {actor_id!r} not found")


class WeightProfileNotFound(MatchmakingException):
    """Raised when a weight profile name cannot be resolved."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Weight profile {name!r} not found")


class InvalidWeightProfile(MatchmakingException):
    """Raised when a weight profile fails validation at load time."""

    def __init__(self, name: Optional[str], errors: List[str]):
        self.name = name
        self.errors = errors
        super().__init__(f"Invalid weight profile {name!r}: {'; '.join(errors)}")


class SignalTimeout(MatchmakingException):
    """Raised when a signal computation overruns the per-pair budget."""

    def __init__(self, signal: str, elapsed_ms: float, budget_ms: float):
        self.signal = signal
        self.elapsed_ms = elapsed_ms
        self.budget_ms = budget_ms
        super().__init__(
            f"Signal {signal!r} exceeded pair budget ({elapsed_ms:.1f}ms > {budget_ms:.1f}ms)"
        )
