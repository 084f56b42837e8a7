"""
Redis Connection Factory

Owns the process-wide Redis connection pool used by the distributed cache.
The pool is created once at startup, verified with PING, and closed on
shutdown.
"""

import asyncio
import time
from typing import Dict, Any, Optional

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    AuthenticationError as RedisAuthError,
    TimeoutError as RedisTimeoutError,
)
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...core.config import Settings, get_settings
from .exceptions import RedisConfigurationException, RedisConnectionException

logger = structlog.get_logger(__name__)


class RedisConnectionFactory:
    """
    Factory for the shared Redis client.

    Provides connection pooling and health checks. Connection establishment
    is retried with exponential backoff; individual cache commands are not.
    """

    def __init__(self, settings: Optional[Settings] = None, max_attempts: int = 3):
        self._settings = settings
        self._max_attempts = max_attempts
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._initialized = False
        self._lock = asyncio.Lock()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    async def initialize(self) -> None:
        """Create the connection pool and verify connectivity."""
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return

            try:
                self._pool = ConnectionPool.from_url(
                    self.settings.REDIS_URL,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=self.settings.REDIS_CONNECTION_TIMEOUT,
                    socket_timeout=self.settings.REDIS_OPERATION_TIMEOUT,
                    retry_on_timeout=True,
                    max_connections=self.settings.REDIS_MAX_CONNECTIONS,
                )
            except ValueError as e:
                raise RedisConfigurationException(
                    message=f"Invalid Redis URL: {e}",
                    config_key="REDIS_URL",
                    original_error=e,
                )

            self._client = Redis(connection_pool=self._pool)

            try:
                await self._test_connection_with_retry()
            except RedisConnectionException:
                await self._client.aclose()
                await self._pool.aclose()
                self._client = None
                self._pool = None
                raise

            self._initialized = True
            logger.info(
                "Redis connection factory initialized",
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
            )

    async def _test_connection_with_retry(self) -> None:
        """PING the server, retrying transient connection failures."""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
                retry=retry_if_exception_type(
                    (RedisConnectionError, RedisTimeoutError, ConnectionError)
                )
                & retry_if_not_exception_type(RedisAuthError),
                before_sleep=lambda retry_state: logger.warning(
                    "Redis connection retry",
                    attempt=retry_state.attempt_number,
                    wait_time=retry_state.next_action.sleep,
                ),
            ):
                with attempt:
                    await self._client.ping()
        except RedisAuthError as e:
            raise RedisConnectionException(
                message="Redis authentication failed during initialization",
                original_error=e,
            )
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise RedisConnectionException(
                message=f"Redis connection test failed: {last_error}",
                original_error=last_error,
            )
        except (RedisConnectionError, RedisTimeoutError, ConnectionError) as e:
            raise RedisConnectionException(
                message=f"Redis connection test failed: {e}", original_error=e
            )

    def get_client(self) -> Redis:
        """
        Return the shared Redis client.

        Raises:
            RedisConnectionException: If the factory was not initialized
        """
        if not self._initialized or self._client is None:
            raise RedisConnectionException(
                message="Redis connection factory not initialized"
            )
        return self._client

    async def health_check(self) -> Dict[str, Any]:
        """Ping Redis and report latency."""
        if not self._initialized or self._client is None:
            return {
                "status": "unhealthy",
                "error": "Redis connection factory not initialized",
            }

        try:
            start_time = time.time()
            await self._client.ping()
            response_time = time.time() - start_time
            return {
                "status": "healthy",
                "response_time_ms": round(response_time * 1000, 2),
            }
        except Exception as e:
            logger.warning("Redis health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

    async def close(self) -> None:
        """Close the client and its pool."""
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
            if self._pool is not None:
                await self._pool.aclose()
                self._pool = None
            self._initialized = False

            logger.info("Redis connection factory closed")
