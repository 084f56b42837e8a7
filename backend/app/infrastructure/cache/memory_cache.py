"""
In-Memory Distributed Cache

Process-local DistributedCache with the same expiration semantics as the
Redis implementation. Used for local development (CACHE_BACKEND=memory) and
as the cache fake in tests, where the clock is injected.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import structlog

from ...domain.products.repository_interfaces import DistributedCache
from ...domain.products.value_objects import CacheEntryOptions

logger = structlog.get_logger(__name__)


@dataclass
class _Entry:
    value: str
    sliding_seconds: Optional[float]
    absolute_deadline: Optional[float]
    expires_at: float

    def touch(self, now: float) -> None:
        if self.sliding_seconds is None:
            return
        expires_at = now + self.sliding_seconds
        if self.absolute_deadline is not None:
            expires_at = min(expires_at, self.absolute_deadline)
        self.expires_at = expires_at


class InMemoryDistributedCache(DistributedCache):
    """Dictionary-backed cache; expired entries are dropped when touched."""

    def __init__(
        self,
        instance_name: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self._instance_name = instance_name
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}

    def _full_key(self, key: str) -> str:
        return f"{self._instance_name}{key}"

    def _live_entry(self, full_key: str) -> Optional[_Entry]:
        entry = self._entries.get(full_key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[full_key]
            logger.debug("Cache entry expired", key=full_key)
            return None
        return entry

    async def get_string(self, key: str) -> Optional[str]:
        entry = self._live_entry(self._full_key(key))
        if entry is None:
            return None
        entry.touch(self._clock())
        return entry.value

    async def set_string(
        self, key: str, value: str, options: CacheEntryOptions
    ) -> None:
        now = self._clock()
        sliding = (
            options.sliding_expiration.total_seconds()
            if options.sliding_expiration is not None
            else None
        )
        absolute_deadline = (
            now + options.absolute_expiration_relative_to_now.total_seconds()
            if options.absolute_expiration_relative_to_now is not None
            else None
        )
        expires_at = min(
            t for t in (
                now + sliding if sliding is not None else None,
                absolute_deadline,
            )
            if t is not None
        )
        self._entries[self._full_key(key)] = _Entry(
            value=value,
            sliding_seconds=sliding,
            absolute_deadline=absolute_deadline,
            expires_at=expires_at,
        )

    async def refresh(self, key: str) -> None:
        entry = self._live_entry(self._full_key(key))
        if entry is not None:
            entry.touch(self._clock())

    async def remove(self, key: str) -> None:
        self._entries.pop(self._full_key(key), None)

    async def ping(self) -> bool:
        return True

    def contains(self, key: str) -> bool:
        """True when key holds an unexpired entry; does not touch it."""
        return self._live_entry(self._full_key(key)) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
