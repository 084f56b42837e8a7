"""
Redis Infrastructure Module

Redis-backed distributed cache for the product catalog.

This module provides:
- RedisConnectionFactory: shared connection pool with startup retry
- RedisDistributedCache: DistributedCache with sliding expiration
- Exception hierarchy wrapping redis-py errors
"""

from .connection_factory import RedisConnectionFactory
from .redis_cache import RedisDistributedCache
from .exceptions import (
    RedisException,
    RedisConnectionException,
    RedisOperationTimeoutException,
    RedisOperationException,
    RedisConfigurationException,
)

__all__ = [
    "RedisConnectionFactory",
    "RedisDistributedCache",
    "RedisException",
    "RedisConnectionException",
    "RedisOperationTimeoutException",
    "RedisOperationException",
    "RedisConfigurationException",
]
