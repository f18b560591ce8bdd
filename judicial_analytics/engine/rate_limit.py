"""
Token-bucket rate limiting keyed by caller and judge.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: float = 0.0


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """
    Allows ``tokens`` operations per ``window_seconds`` for each key.

    Buckets refill continuously at ``tokens / window_seconds`` per second.
    A bucket left idle for a whole window is full again and is dropped, at
    most once per window, so the table only holds recently seen keys.

    Example:
        >>> limiter = TokenBucketRateLimiter(tokens=20, window_seconds=60)
        >>> limiter.limit("203.0.113.7:judge-42").allowed
        True
    """

    def __init__(
        self,
        tokens: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if tokens <= 0 or window_seconds <= 0:
            raise ValueError("Rate limit tokens and window must be positive")
        self.capacity = float(tokens)
        self.refill_rate = tokens / float(window_seconds)
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._buckets: Dict[str, _Bucket] = {}
        self._lock = threading.Lock()
        self._last_prune = clock()

    def limit(self, key: str) -> RateLimitDecision:
        """Consume one token for ``key`` if available."""
        now = self._clock()
        with self._lock:
            if now - self._last_prune >= self.window_seconds:
                self._prune(now)

            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = _Bucket(tokens=self.capacity, updated_at=now)
                self._buckets[key] = bucket

            elapsed = max(0.0, now - bucket.updated_at)
            bucket.tokens = min(self.capacity, bucket.tokens + elapsed * self.refill_rate)
            bucket.updated_at = now

            if bucket.tokens >= 1:
                bucket.tokens -= 1
                return RateLimitDecision(allowed=True, remaining=int(bucket.tokens))

            retry_after = (1 - bucket.tokens) / self.refill_rate
            return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

    def _prune(self, now: float) -> None:
        """Drop buckets idle for at least one window. Caller holds the lock."""
        stale = [
            key
            for key, bucket in self._buckets.items()
            if now - bucket.updated_at >= self.window_seconds
        ]
        for key in stale:
            del self._buckets[key]
        self._last_prune = now
