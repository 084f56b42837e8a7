"""
Product Repository Interfaces

Abstract contracts for the authoritative product store and the distributed
cache. The cache-aside service depends only on these, so both backends can
be replaced by in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Product
from .value_objects import CacheEntryOptions


class ProductStore(ABC):
    """
    Authoritative product store.

    save and remove are transactional: when they return, the change is
    committed.
    """

    @abstractmethod
    async def find_by_id(self, product_id: int) -> Optional[Product]:
        """Find a product by identifier."""
        pass

    @abstractmethod
    async def list_all(self) -> List[Product]:
        """Return every product."""
        pass

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """
        Overwrite every mutable field of an existing product and commit.

        Raises:
            ProductNotFoundError: If no row exists for product.id
        """
        pass

    @abstractmethod
    async def remove(self, product_id: int) -> None:
        """
        Delete a product and commit.

        Raises:
            ProductNotFoundError: If no row exists for product_id
        """
        pass


class DistributedCache(ABC):
    """
    String key-value cache shared across service instances.

    Implementations prepend their configured instance name to every key.
    """

    @abstractmethod
    async def get_string(self, key: str) -> Optional[str]:
        """Return the value for key, or None; a hit resets its sliding window."""
        pass

    @abstractmethod
    async def set_string(
        self, key: str, value: str, options: CacheEntryOptions
    ) -> None:
        """Store value under key with the given expiration policy."""
        pass

    @abstractmethod
    async def refresh(self, key: str) -> None:
        """
        Reset the sliding window of key without reading it.

        Part of the distributed cache client contract shared with other
        writers of the same keys. ProductCacheService does not call it;
        get_string already resets the window on a hit.
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete key."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the cache is reachable."""
        pass
