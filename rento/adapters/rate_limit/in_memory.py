"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and counters reset when the process restarts.
- Thread-safe: a single lock guards every store.
- Expired records are swept opportunistically on a small random fraction of
  checks instead of by a background timer.
"""

from __future__ import annotations

import logging
import math
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable

from rento.adapters.rate_limit.base import AbstractRateLimiter, RateLimitConfig, RateLimitResult

logger = logging.getLogger(__name__)

DEFAULT_CLEANUP_PROBABILITY = 0.01


@dataclass
class _WindowState:
    count: int
    reset_at: int


class InMemoryRateLimiter(AbstractRateLimiter):
    """Fixed-window counter per (store_name, caller_id).

    A window opens on a caller's first request and lasts ``window_ms``; once
    the clock passes ``reset_at`` the next request starts a fresh window.

    Stores are created lazily per ``config.store_name`` so exhausting one
    action class never touches another.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        rng: Callable[[], float] = random.random,
        cleanup_probability: float = DEFAULT_CLEANUP_PROBABILITY,
    ) -> None:
        """Initialize an empty limiter.

        Args:
            clock: Time source returning UNIX time in seconds.
            rng: Source of floats in [0, 1) used to decide when to sweep.
            cleanup_probability: Chance that a check sweeps expired records.

        Raises:
            ValueError: If cleanup_probability is outside [0, 1].
        """
        if not 0.0 <= cleanup_probability <= 1.0:
            raise ValueError("cleanup_probability must be between 0 and 1")

        self._clock = clock
        self._rng = rng
        self._cleanup_probability = cleanup_probability
        self._lock = threading.RLock()
        self._stores: dict[str, dict[str, _WindowState]] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _store(self, store_name: str) -> dict[str, _WindowState]:
        store = self._stores.get(store_name)
        if store is None:
            store = self._stores[store_name] = {}
        return store

    def check(self, caller_id: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request and report whether it is allowed.

        Args:
            caller_id: Authenticated caller identifier.
            config: Quota for the action class.

        Returns:
            RateLimitResult; a blocked result keeps the existing ``reset_at``.

        Raises:
            ValueError: If caller_id is empty.
        """
        if not caller_id:
            raise ValueError("caller_id must be a non-empty string")

        now = self._now_ms()

        with self._lock:
            if self._rng() < self._cleanup_probability:
                self._sweep_locked(now)

            store = self._store(config.store_name)
            state = store.get(caller_id)

            if state is None or now > state.reset_at:
                state = _WindowState(count=1, reset_at=now + config.window_ms)
                store[caller_id] = state
                return RateLimitResult(
                    allowed=True,
                    remaining=config.max_requests - 1,
                    reset_at=state.reset_at,
                    limit=config.max_requests,
                )

            if state.count >= config.max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=state.reset_at,
                    limit=config.max_requests,
                    retry_after_seconds=max(0, math.ceil((state.reset_at - now) / 1000)),
                )

            state.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=config.max_requests - state.count,
                reset_at=state.reset_at,
                limit=config.max_requests,
            )

    def sweep_expired(self) -> int:
        """Delete records whose window has passed, across all stores.

        Returns:
            Number of records removed.
        """
        with self._lock:
            return self._sweep_locked(self._now_ms())

    def _sweep_locked(self, now: int) -> int:
        removed = 0
        for store in self._stores.values():
            expired = [key for key, state in store.items() if now > state.reset_at]
            for key in expired:
                del store[key]
            removed += len(expired)
        if removed:
            logger.debug("rate_limit.sweep", extra={"removed": removed})
        return removed

    def size(self, store_name: str | None = None) -> int:
        """Number of tracked records, in one store or overall."""
        with self._lock:
            if store_name is not None:
                return len(self._stores.get(store_name, {}))
            return sum(len(store) for store in self._stores.values())

    def reset(self) -> None:
        """Forget every counter in every store."""
        with self._lock:
            self._stores.clear()
