"""
FastAPI dependency wiring for the product API.

The distributed cache is created once in the application lifespan and kept
on app.state; the store repository and the cache-aside service are built per
request around the request's database session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..db import get_database_session
from ..domain.products.repository_interfaces import DistributedCache
from ..repositories.product import ProductRepository
from ..services.cache.product_cache_service import ProductCacheService


def get_distributed_cache(request: Request) -> DistributedCache:
    """Return the process-wide distributed cache."""
    cache = getattr(request.app.state, "distributed_cache", None)
    if cache is None:
        raise RuntimeError("Distributed cache not initialized")
    return cache


def get_product_cache_service(
    session: AsyncSession = Depends(get_database_session),
    cache: DistributedCache = Depends(get_distributed_cache),
    settings: Settings = Depends(get_settings),
) -> ProductCacheService:
    """Assemble the cache-aside service for one request."""
    return ProductCacheService(
        store=ProductRepository(session),
        cache=cache,
        sliding_expiration_seconds=settings.CACHE_SLIDING_EXPIRATION_SECONDS,
    )
