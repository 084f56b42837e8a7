"""
Redis Distributed Cache

DistributedCache implementation on Redis. Each entry is a hash

    <instance_name><key> -> {data, sldexp, absexp}

where sldexp is the sliding window and absexp the absolute deadline, both in
.NET ticks (100 ns units; absexp counted from 0001-01-01 UTC, -1 when unset),
so entries are interchangeable with the .NET Redis distributed cache. The
Redis key TTL always holds the effective expiration; reads re-apply it so idle
time is measured from the last access.
"""

import time
from typing import Any, Awaitable, Callable, Optional

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from redis.asyncio import Redis
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError

from ...domain.products.exceptions import ProductDecodeError
from ...domain.products.repository_interfaces import DistributedCache
from ...domain.products.value_objects import CacheEntryOptions
from .exceptions import RedisOperationException, RedisOperationTimeoutException

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

DATA_FIELD = "data"
SLIDING_FIELD = "sldexp"
ABSOLUTE_FIELD = "absexp"
NOT_PRESENT = -1
TICKS_PER_SECOND = 10_000_000
UNIX_EPOCH_TICKS = 621_355_968_000_000_000


class RedisDistributedCache(DistributedCache):
    """
    Redis-backed distributed cache with per-entry sliding expiration.

    Args:
        client: Shared redis.asyncio client (decode_responses=True)
        instance_name: Prefix prepended to every key
        clock: Wall-clock source in seconds, injectable for tests
    """

    def __init__(
        self,
        client: Redis,
        instance_name: str = "",
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._instance_name = instance_name
        self._clock = clock

    def _full_key(self, key: str) -> str:
        return f"{self._instance_name}{key}"

    async def _execute(
        self, operation: str, key: str, func: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Run one cache command inside a span, wrapping Redis errors."""
        with tracer.start_as_current_span(f"redis.cache.{operation}") as span:
            span.set_attribute("redis.operation", operation)
            span.set_attribute("cache.key", key)

            try:
                result = await func()
                span.set_status(Status(StatusCode.OK))
                return result

            except RedisTimeoutError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                logger.error(
                    "Redis cache operation timed out", operation=operation, key=key
                )
                raise RedisOperationTimeoutException(
                    operation=operation, key=key, original_error=e
                )

            except RedisError as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                logger.error(
                    "Redis cache operation failed",
                    operation=operation,
                    key=key,
                    error=str(e),
                )
                raise RedisOperationException(
                    operation=operation, key=key, original_error=e
                )

    async def get_string(self, key: str) -> Optional[str]:
        full_key = self._full_key(key)

        async def _get() -> Optional[str]:
            try:
                absexp, sldexp, data = await self._client.hmget(
                    full_key, [ABSOLUTE_FIELD, SLIDING_FIELD, DATA_FIELD]
                )
            except UnicodeDecodeError as e:
                logger.warning("Cache entry is not valid UTF-8", key=full_key)
                raise ProductDecodeError(
                    f"Cached value under {full_key} is not valid UTF-8",
                    original_error=e,
                )
            if data is None:
                return None
            await self._apply_sliding_expiration(full_key, absexp, sldexp)
            return data

        return await self._execute("get", full_key, _get)

    async def set_string(
        self, key: str, value: str, options: CacheEntryOptions
    ) -> None:
        full_key = self._full_key(key)

        absolute_seconds = options.absolute_seconds
        absexp = (
            _unix_to_ticks(self._clock()) + absolute_seconds * TICKS_PER_SECOND
            if absolute_seconds is not None
            else NOT_PRESENT
        )
        sliding_seconds = options.sliding_seconds
        sldexp = (
            sliding_seconds * TICKS_PER_SECOND
            if sliding_seconds is not None
            else NOT_PRESENT
        )
        ttl = options.initial_ttl_seconds()

        async def _set() -> None:
            pipe = self._client.pipeline(transaction=True)
            pipe.hset(
                full_key,
                mapping={
                    DATA_FIELD: value,
                    SLIDING_FIELD: sldexp,
                    ABSOLUTE_FIELD: absexp,
                },
            )
            pipe.expire(full_key, ttl)
            await pipe.execute()

        await self._execute("set", full_key, _set)
        logger.debug("Cache entry written", key=full_key, ttl_seconds=ttl)

    async def refresh(self, key: str) -> None:
        full_key = self._full_key(key)

        async def _refresh() -> None:
            absexp, sldexp = await self._client.hmget(
                full_key, [ABSOLUTE_FIELD, SLIDING_FIELD]
            )
            await self._apply_sliding_expiration(full_key, absexp, sldexp)

        await self._execute("refresh", full_key, _refresh)

    async def remove(self, key: str) -> None:
        full_key = self._full_key(key)

        async def _remove() -> None:
            await self._client.delete(full_key)

        await self._execute("remove", full_key, _remove)
        logger.debug("Cache entry removed", key=full_key)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("Redis ping failed", error=str(e))
            return False

    async def _apply_sliding_expiration(
        self, full_key: str, absexp: Optional[str], sldexp: Optional[str]
    ) -> None:
        """Reset the key TTL to the sliding window, capped by the absolute deadline."""
        sliding = _as_int(sldexp)
        if sliding == NOT_PRESENT:
            return

        ttl = sliding // TICKS_PER_SECOND
        absolute = _as_int(absexp)
        if absolute != NOT_PRESENT:
            remaining = (absolute - _unix_to_ticks(self._clock())) // TICKS_PER_SECOND
            ttl = min(ttl, remaining)

        await self._client.expire(full_key, max(ttl, 1))


def _as_int(value: Optional[str]) -> int:
    if value is None:
        return NOT_PRESENT
    return int(value)


def _unix_to_ticks(timestamp: float) -> int:
    """Unix seconds to .NET UTC ticks, at millisecond precision."""
    return UNIX_EPOCH_TICKS + int(timestamp * 1000) * 10_000
