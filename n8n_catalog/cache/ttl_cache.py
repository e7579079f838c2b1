"""
In-memory TTL cache for n8n API responses.

Entries expire lazily on read; ``cleanup()`` sweeps expired entries when a
caller asks for it. Capacity is enforced by evicting the entry inserted
earliest, without promoting entries on read.
"""

import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar, Union

from n8n_catalog.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 300.0
DEFAULT_MAX_SIZE = 100


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and the epoch second it expires at"""
    data: T
    expiry: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expiry


class TimeBoundCache(Generic[T]):
    """Capacity-bounded cache with per-entry expiry for a single domain."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_size: int = DEFAULT_MAX_SIZE,
        name: str = "cache",
        clock: Callable[[], float] = time.time,
        debug: bool = False,
    ):
        if ttl <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl}")
        if max_size <= 0:
            raise ValueError(f"Cache max_size must be positive, got {max_size}")

        self.ttl = ttl
        self.max_size = max_size
        self.name = name
        self.debug = debug
        self._clock = clock
        # dicts keep insertion order; overwriting a key keeps its position
        self._cache: Dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> Optional[T]:
        """Get cached value if it exists and hasn't expired"""
        entry = self._cache.get(key)
        if entry is None:
            if self.debug:
                logger.debug(f"Cache miss in {self.name}: {key}")
            return None

        if entry.is_expired(self._clock()):
            del self._cache[key]
            if self.debug:
                logger.debug(f"Cache entry expired in {self.name}: {key}")
            return None

        if self.debug:
            logger.debug(f"Cache hit in {self.name}: {key}")
        return entry.data

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Set cached value, evicting the oldest entry when at capacity"""
        # Capacity is checked before looking at ``key`` itself, so an
        # overwrite at capacity still evicts the oldest entry.
        if len(self._cache) >= self.max_size:
            oldest_key = next(iter(self._cache))
            del self._cache[oldest_key]
            if self.debug:
                logger.debug(f"Evicted {oldest_key} from {self.name} (max size {self.max_size})")

        effective_ttl = ttl if ttl and ttl > 0 else self.ttl
        self._cache[key] = CacheEntry(data=value, expiry=self._clock() + effective_ttl)

    def has(self, key: str) -> bool:
        """Check if key exists and hasn't expired"""
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Delete a key, returning whether it was present"""
        return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cached entries"""
        self._cache.clear()

    def cleanup(self) -> int:
        """Remove expired entries and return how many were removed"""
        now = self._clock()
        expired_keys = [key for key, entry in self._cache.items() if entry.is_expired(now)]
        for key in expired_keys:
            del self._cache[key]

        if expired_keys and self.debug:
            logger.debug(f"Cleaned up {len(expired_keys)} expired entries from {self.name}")
        return len(expired_keys)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        return {
            "size": len(self._cache),
            "max_size": self.max_size,
            "ttl": self.ttl,
        }

    async def get_or_set(
        self,
        key: str,
        fetcher: Callable[[], Union[T, Awaitable[T]]],
        ttl: Optional[float] = None,
    ) -> T:
        """
        Return the cached value for ``key`` or fetch, cache and return it.

        Concurrent calls for the same key are not deduplicated: each one that
        misses runs ``fetcher`` and the last ``set`` wins. Errors raised by
        ``fetcher`` propagate and nothing is cached.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        data = fetcher()
        if inspect.isawaitable(data):
            data = await data

        self.set(key, data, ttl)
        return data

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return self.has(key)
