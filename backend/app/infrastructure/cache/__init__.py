"""
Distributed cache backends.

build_distributed_cache picks the implementation named by CACHE_BACKEND.
"""

from typing import Optional

from ...core.config import Settings
from ...domain.products.repository_interfaces import DistributedCache
from ..redis.connection_factory import RedisConnectionFactory
from ..redis.redis_cache import RedisDistributedCache
from .memory_cache import InMemoryDistributedCache


def build_distributed_cache(
    settings: Settings, factory: Optional[RedisConnectionFactory] = None
) -> DistributedCache:
    """
    Build the configured distributed cache.

    The Redis backend requires an initialized connection factory.
    """
    if settings.CACHE_BACKEND == "memory":
        return InMemoryDistributedCache(instance_name=settings.REDIS_INSTANCE_NAME)

    if factory is None:
        raise ValueError("A RedisConnectionFactory is required for the redis backend")

    return RedisDistributedCache(
        factory.get_client(), instance_name=settings.REDIS_INSTANCE_NAME
    )


__all__ = [
    "build_distributed_cache",
    "InMemoryDistributedCache",
    "RedisDistributedCache",
]
