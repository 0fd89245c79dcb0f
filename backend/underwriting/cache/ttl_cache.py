"""Time-To-Live (TTL) cache for resolved insurer scoring configurations."""
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    In-memory cache with configurable time-to-live (TTL) expiry.

    Thread-safe: every operation holds a lock, so one instance can be shared
    by all request threads.

    Fills can be made conditional on a generation token: take
    ``generation()`` before loading a value from the database and pass it to
    ``set()``. If the key was cleared in between (a concurrent write), the
    stale value is not stored.

    Attributes:
        ttl_seconds: Time-to-live duration in seconds (default: 300 = 5 minutes)

    Example:
        >>> cache = TTLCache(ttl_seconds=300)
        >>> token = cache.generation()
        >>> cache.set("insurer:acme:config", config, generation=token)
        True
    """

    def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic):
        """
        Initialize TTL cache.

        Args:
            ttl_seconds: Time-to-live in seconds; 0 disables caching
            clock: Source of the current time in seconds (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[str, Tuple[Any, float]] = {}  # {key: (value, stored_at)}
        self._lock = threading.Lock()

        # Invalidation counter; each clear records the counter value per key
        self._counter = 0
        self._cleared_at: Dict[str, int] = {}
        self._all_cleared_at = 0

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def generation(self) -> int:
        """Token to pass to set() for a fill that must not outlive a clear."""
        with self._lock:
            return self._counter

    def set(self, key: str, value: Any, generation: Optional[int] = None) -> bool:
        """
        Store a value with the current timestamp.

        Args:
            key: Cache key
            value: Value to store
            generation: Token from generation() taken before the value was
                loaded; the value is dropped if the key was cleared since

        Returns:
            True if the value was stored
        """
        if self.ttl_seconds <= 0:
            return False
        with self._lock:
            if generation is not None:
                last_cleared = max(self._cleared_at.get(key, 0), self._all_cleared_at)
                if last_cleared > generation:
                    return False
            self._cache[key] = (value, self._clock())
            return True

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a value if it exists and hasn't expired.

        Returns:
            Cached value, or None on a miss or after expiry
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, stored_at = entry
            if self._expired(stored_at, self._clock()):
                del self._cache[key]
                return None

            return value

    def clear(self, key: str) -> None:
        """Invalidate a single entry (e.g. after a configuration upsert)."""
        with self._lock:
            self._cache.pop(key, None)
            self._counter += 1
            self._cleared_at[key] = self._counter

    def clear_all(self) -> None:
        with self._lock:
            self._cache.clear()
            self._counter += 1
            self._all_cleared_at = self._counter

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with 'size' and 'ttl_seconds' keys
        """
        with self._lock:
            return {
                "size": len(self._cache),
                "ttl_seconds": self.ttl_seconds
            }
