"""In-process TTL cache for upstream lookups."""

from __future__ import annotations

import functools
import threading
import time
from typing import Any, Callable, Dict, Tuple, TypeVar

T = TypeVar("T")

_cache_lock = threading.Lock()
_memory_cache: Dict[Tuple[str, Tuple, Tuple], Tuple[float, Any]] = {}
_clock = time.monotonic


def ttl_memoize(prefix: str, ttl_seconds: float) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Thread-safe memoization with expiry.

    Keys are grouped by ``prefix`` so one upstream service can be cleared
    without touching the others. ``None`` results are not stored, so a failed
    lookup is retried on the next request instead of being pinned for a day.
    Expired entries of the prefix are dropped whenever a new result is stored.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            key = (prefix, args, tuple(sorted(kwargs.items())))
            now = _clock()
            with _cache_lock:
                hit = _memory_cache.get(key)
                if hit is not None:
                    if now - hit[0] < ttl_seconds:
                        return hit[1]
                    del _memory_cache[key]
            result = func(*args, **kwargs)
            if result is not None and ttl_seconds > 0:
                with _cache_lock:
                    _evict_expired(prefix, ttl_seconds, now)
                    _memory_cache[key] = (now, result)
            return result

        return wrapper

    return decorator


def _evict_expired(prefix: str, ttl_seconds: float, now: float) -> None:
    # caller holds _cache_lock
    stale = [key for key, (stored, _) in _memory_cache.items() if key[0] == prefix and now - stored >= ttl_seconds]
    for key in stale:
        del _memory_cache[key]


def clear_prefix(prefix: str) -> None:
    """Clear all cache entries for the given prefix."""

    with _cache_lock:
        to_delete = [key for key in _memory_cache if key[0] == prefix]
        for key in to_delete:
            del _memory_cache[key]


__all__ = ["ttl_memoize", "clear_prefix"]
