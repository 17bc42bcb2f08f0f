"""Time-bounded cache for the vault-wide tag list."""

from __future__ import annotations

import time
from typing import Callable

from loguru import logger

from .validator import TagSet


class TagCache:
    """Caller-owned cache of a TagSet with a time-to-live.

    The clock is injected so expiry can be driven deterministically.

    Example:
        cache = TagCache(ttl=60.0)
        tags = cache.get(vault.all_tags)
        ...
        cache.invalidate()  # after a write that changes tags
    """

    def __init__(self, ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        """Initialize TagCache.

        Args:
            ttl: Seconds a loaded value stays fresh.
            clock: Monotonic time source in seconds.
        """
        self._ttl = ttl
        self._clock = clock
        self._value: TagSet | None = None
        self._loaded_at = 0.0

    @property
    def is_fresh(self) -> bool:
        """Whether a cached value exists and has not expired."""
        return self._value is not None and self._clock() - self._loaded_at < self._ttl

    def get(self, loader: Callable[[], TagSet]) -> TagSet:
        """Return the cached TagSet, calling ``loader`` when stale.

        Args:
            loader: Zero-argument callable producing the current tag set.

        Returns:
            The cached or freshly loaded TagSet.
        """
        if self.is_fresh:
            return self._value  # type: ignore[return-value]

        value = loader()
        self._value = value
        self._loaded_at = self._clock()
        logger.debug(f"Tag cache refreshed: {len(value)} tags")
        return value

    def invalidate(self) -> None:
        """Drop the cached value so the next ``get`` reloads."""
        self._value = None
