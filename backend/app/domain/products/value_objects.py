"""
Product Cache Value Objects

Immutable value objects for the product cache: key naming and the
per-entry expiration policy.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from ...constants import ALL_PRODUCTS_CACHE_KEY, PRODUCT_CACHE_KEY_PREFIX


class CacheKeyKind(str, Enum):
    """Kind of product cache key, used as a metrics label."""

    LIST = "list"
    ITEM = "item"


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    The prefix convention is shared with existing cached state and must not
    change.
    """

    value: str
    kind: CacheKeyKind

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def all_products(cls) -> "CacheKey":
        """Key holding the full product list."""
        return cls(ALL_PRODUCTS_CACHE_KEY, CacheKeyKind.LIST)

    @classmethod
    def product(cls, product_id: int) -> "CacheKey":
        """Key holding a single product."""
        return cls(f"{PRODUCT_CACHE_KEY_PREFIX}{product_id}", CacheKeyKind.ITEM)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CacheEntryOptions:
    """
    Expiration policy for a single cache entry.

    sliding_expiration: idle period after which the entry expires; every
        read resets it.
    absolute_expiration_relative_to_now: hard lifetime no read can extend.
    """

    sliding_expiration: Optional[timedelta] = None
    absolute_expiration_relative_to_now: Optional[timedelta] = None

    def __post_init__(self) -> None:
        """Validate expiration values."""
        if self.sliding_expiration is None and self.absolute_expiration_relative_to_now is None:
            raise ValueError("At least one expiration must be set")

        for name in ("sliding_expiration", "absolute_expiration_relative_to_now"):
            value = getattr(self, name)
            if value is not None and value <= timedelta(0):
                raise ValueError(f"{name} must be positive")

    @classmethod
    def sliding(cls, seconds: int) -> "CacheEntryOptions":
        """Sliding window of the given length."""
        return cls(sliding_expiration=timedelta(seconds=seconds))

    @property
    def sliding_seconds(self) -> Optional[int]:
        if self.sliding_expiration is None:
            return None
        return int(self.sliding_expiration.total_seconds())

    @property
    def absolute_seconds(self) -> Optional[int]:
        if self.absolute_expiration_relative_to_now is None:
            return None
        return int(self.absolute_expiration_relative_to_now.total_seconds())

    def initial_ttl_seconds(self) -> int:
        """TTL to apply when the entry is written."""
        candidates = [
            s for s in (self.sliding_seconds, self.absolute_seconds) if s is not None
        ]
        return max(min(candidates), 1)
