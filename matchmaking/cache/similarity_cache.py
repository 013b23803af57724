#!/usr/bin/env python3
"""
Similarity Cache - Memoizes raw signal outcomes across matching requests.

Keys are qualified by a content hash of the fields each signal reads:

    (signal, "<idA>:<hashA>", "<idB>:<hashB>", scope)

so an actor update produces a new key and stale entries are simply never hit
again (they age out through eviction). Symmetric signals sort the two actor
parts so (A, B) and (B, A) share one entry; directional signals keep the order
and are cached per direction.

The cache stores raw pre-weighting outcomes, never final scores, so entries
are valid under every weight profile.

Writes lock per key: concurrent requests for the same key compute once, while
different keys never wait on each other. A key lock is shared by every thread
waiting on it and dropped only when the last one leaves.
"""

import logging
import threading
from collections import deque
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple, TYPE_CHECKING

from matchmaking.signals.base import SignalOutcome

if TYPE_CHECKING:
    from matchmaking.cache.redis_tier import RedisScoreStore
    from matchmaking.models import ActorProfile

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100_000


class CacheKey(NamedTuple):
    signal: str
    left: str
    right: str
    scope: str = ""

    def to_string(self) -> str:
        return f"{self.signal}|{self.left}|{self.right}|{self.scope}"


class _KeyLock:
    """Per-key lock plus the number of threads holding or waiting on it."""
    __slots__ = ('lock', 'waiters')

    def __init__(self):
        self.lock = threading.Lock()
        self.waiters = 0


class SimilarityCache:
    """
    Thread-safe, bounded cache of raw signal outcomes.

    An optional RedisScoreStore acts as a second tier shared between
    processes: local misses fall through to it and computed outcomes are
    written through.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        backend: Optional["RedisScoreStore"] = None
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self.backend = backend
        self._entries: Dict[CacheKey, SignalOutcome] = {}
        self._order: deque = deque()
        self._locks: Dict[CacheKey, _KeyLock] = {}
        self._locks_guard = threading.Lock()
        self._evict_lock = threading.Lock()
        # Counters are approximate under heavy concurrency
        self._hits = 0
        self._misses = 0
        self._backend_hits = 0
        self._evictions = 0

    @staticmethod
    def make_key(
        signal: str,
        actor_a: "ActorProfile",
        actor_b: "ActorProfile",
        fields: Tuple[str, ...],
        symmetric: bool,
        scope: str = ""
    ) -> CacheKey:
        left = f"{actor_a.id}:{actor_a.fingerprint(fields)}"
        right = f"{actor_b.id}:{actor_b.fingerprint(fields)}"
        if symmetric and right < left:
            left, right = right, left
        return CacheKey(signal, left, right, scope)

    def get(self, key: CacheKey) -> Optional[SignalOutcome]:
        outcome = self._entries.get(key)
        if outcome is not None:
            self._hits += 1
            return outcome
        if self.backend is not None:
            outcome = self.backend.get_outcome(key.to_string())
            if outcome is not None:
                self._backend_hits += 1
                self._store(key, outcome)
                return outcome
        return None

    def get_or_compute(self, key: CacheKey, compute: Callable[[], SignalOutcome]) -> SignalOutcome:
        """
        Return the cached outcome for key, computing and storing it on a miss.

        Exceptions from compute (e.g. SignalTimeout) propagate and nothing
        is cached.
        """
        outcome = self.get(key)
        if outcome is not None:
            return outcome

        key_lock = self._acquire_key_lock(key)
        try:
            with key_lock.lock:
                outcome = self._entries.get(key)
                if outcome is not None:
                    self._hits += 1
                    return outcome

                self._misses += 1
                outcome = compute()
                self._store(key, outcome)
                if self.backend is not None:
                    self.backend.set_outcome(key.to_string(), outcome)
                return outcome
        finally:
            self._release_key_lock(key, key_lock)

    def _acquire_key_lock(self, key: CacheKey) -> _KeyLock:
        with self._locks_guard:
            key_lock = self._locks.get(key)
            if key_lock is None:
                key_lock = self._locks[key] = _KeyLock()
            key_lock.waiters += 1
            return key_lock

    def _release_key_lock(self, key: CacheKey, key_lock: _KeyLock) -> None:
        with self._locks_guard:
            key_lock.waiters -= 1
            if key_lock.waiters == 0:
                del self._locks[key]

    def _store(self, key: CacheKey, outcome: SignalOutcome) -> None:
        if key not in self._entries:
            self._order.append(key)
        self._entries[key] = outcome
        if len(self._entries) > self.max_entries:
            self._evict()

    def _evict(self) -> None:
        # Only one thread evicts at a time; others skip rather than wait
        if not self._evict_lock.acquire(blocking=False):
            return
        try:
            while len(self._entries) > self.max_entries and self._order:
                oldest = self._order.popleft()
                if self._entries.pop(oldest, None) is not None:
                    self._evictions += 1
        finally:
            self._evict_lock.release()

    def clear(self) -> None:
        self._entries.clear()
        self._order.clear()
        logger.info("Cleared similarity cache")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        lookups = self._hits + self._misses
        return {
            'entries': len(self._entries),
            'max_entries': self.max_entries,
            'hits': self._hits,
            'misses': self._misses,
            'backend_hits': self._backend_hits,
            'evictions': self._evictions,
            'hit_rate': self._hits / lookups if lookups else 0.0,
            'backend': self.backend.get_cache_stats() if self.backend is not None else None,
        }
