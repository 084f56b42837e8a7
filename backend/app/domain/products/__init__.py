"""Product catalog domain: entities, cache keys, codec and contracts."""

from .entities import Product, CachedProduct
from .value_objects import CacheKey, CacheKeyKind, CacheEntryOptions
from .results import OperationResult, OperationStatus
from .exceptions import ProductDecodeError, ProductNotFoundError
from .repository_interfaces import DistributedCache, ProductStore

__all__ = [
    "Product",
    "CachedProduct",
    "CacheKey",
    "CacheKeyKind",
    "CacheEntryOptions",
    "OperationResult",
    "OperationStatus",
    "ProductDecodeError",
    "ProductNotFoundError",
    "DistributedCache",
    "ProductStore",
]
