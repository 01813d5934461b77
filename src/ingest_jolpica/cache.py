"""
In-memory TTL cache for validated API responses.

Entries expire lazily: an expired entry is evicted the next time it is read,
never by a background sweep. An evicted payload is kept aside as the last
known good value so peek_stale() can still serve it after a failed refresh;
it is dropped only when the key is written again or the cache is cleared.
"""
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from src.config import cfg
from src.utils.logger import logger


@dataclass
class CacheEntry:
    payload: dict[str, Any]
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


class ResponseCache:
    """
    Maps request keys to the most recent validated payload.

    Args:
        default_ttl: TTL in seconds for writes that don't pass one.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = cfg.api.default_cache_ttl if default_ttl is None else default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._evicted: dict[str, CacheEntry] = {}

    def read(self, key: str) -> Optional[dict[str, Any]]:
        """Return the payload if fresh; evict and return None if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            logger.debug(f"Cache expired: {key}")
            self._evicted[key] = self._entries.pop(key)
            return None
        logger.debug(f"Cache hit: {key}")
        return entry.payload

    def write(self, key: str, payload: dict[str, Any], ttl: float | None = None) -> None:
        self._evicted.pop(key, None)
        self._entries[key] = CacheEntry(
            payload=payload,
            stored_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def peek_stale(self, key: str) -> Optional[dict[str, Any]]:
        """Return the last payload for key regardless of expiry, without evicting it."""
        entry = self._entries.get(key) or self._evicted.get(key)
        return entry.payload if entry is not None else None

    def clear(self) -> None:
        logger.debug(f"Clearing {len(self._entries)} cached responses")
        self._entries.clear()
        self._evicted.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
