"""
Product Cache Service

Cache-aside coordination for the product catalog. Decides for every
operation when to read the distributed cache, when to go to the store, and
how to refresh or invalidate cache entries after a write.

Consistency model:
- Reads trust a cache hit without revalidating against the store.
- Update overwrites the per-product entry with the stored snapshot after
  the store commit.
- Delete removes the per-product entry after the store commit.
- Neither update nor delete touches the product-list entry; it converges
  when its sliding window lapses.
- Store and cache are never written in one transaction. A cache failure
  after a committed store write is reported but not compensated.
"""

from typing import Callable, List, Optional, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from ...constants import DEFAULT_SLIDING_EXPIRATION_SECONDS
from ...domain.products.codec import (
    decode_product,
    decode_products,
    encode_product,
    encode_products,
)
from ...domain.products.entities import Product
from ...domain.products.exceptions import ProductDecodeError, ProductNotFoundError
from ...domain.products.repository_interfaces import DistributedCache, ProductStore
from ...domain.products.results import OperationResult
from ...domain.products.value_objects import CacheEntryOptions, CacheKey
from ...monitoring.metrics import (
    BACKEND_FAILURES,
    CACHE_DECODE_FAILURES,
    CACHE_HITS,
    CACHE_MISSES,
    CACHE_WRITES,
    OPERATION_DURATION,
)

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")

LIST_FAILURE_MESSAGE = "An error occurred while retrieving products."
GET_FAILURE_MESSAGE = "An error occurred while retrieving the product."
UPDATE_FAILURE_MESSAGE = "An error occurred while updating the product."
DELETE_FAILURE_MESSAGE = "An error occurred while deleting the product."
ID_MISMATCH_MESSAGE = "Product ID mismatch."


class ProductCacheService:
    """
    Cache-aside orchestrator for product reads and writes.

    Both collaborators are injected; the service holds no process-wide state
    and performs no locking. Every public method returns an OperationResult
    and never raises for not-found, invalid input or backend failures.
    """

    def __init__(
        self,
        store: ProductStore,
        cache: DistributedCache,
        sliding_expiration_seconds: int = DEFAULT_SLIDING_EXPIRATION_SECONDS,
    ):
        self.store = store
        self.cache = cache
        self.entry_options = CacheEntryOptions.sliding(sliding_expiration_seconds)

    async def list_all(self) -> OperationResult[List[Product]]:
        """Return every product, from the list entry when cached."""
        key = CacheKey.all_products()

        with (
            tracer.start_as_current_span("product_cache.list_all") as span,
            OPERATION_DURATION.labels(operation="list_all").time(),
        ):
            span.set_attribute("cache.key", key.value)

            try:
                cached = await self._read_cached(key, decode_products, span)
                if cached is not None:
                    return OperationResult.ok(cached)

                products = await self.store.list_all()
                await self._write_cached(key, encode_products(products))

                span.set_attribute("product.count", len(products))
                return OperationResult.ok(products)

            except Exception as e:
                return self._backend_failure("list_all", LIST_FAILURE_MESSAGE, e, span)

    async def get_by_id(self, product_id: int) -> OperationResult[Product]:
        """Return one product, populating its cache entry on a miss."""
        key = CacheKey.product(product_id)

        with (
            tracer.start_as_current_span("product_cache.get_by_id") as span,
            OPERATION_DURATION.labels(operation="get_by_id").time(),
        ):
            span.set_attribute("cache.key", key.value)
            span.set_attribute("product.id", product_id)

            try:
                cached = await self._read_cached(key, decode_product, span)
                if cached is not None:
                    return OperationResult.ok(cached)

                product = await self.store.find_by_id(product_id)
                if product is None:
                    logger.info("Product not found", product_id=product_id)
                    return OperationResult.not_found(product_id)

                await self._write_cached(key, encode_product(product))
                return OperationResult.ok(product)

            except Exception as e:
                return self._backend_failure("get_by_id", GET_FAILURE_MESSAGE, e, span)

    async def update(self, product_id: int, product: Product) -> OperationResult[None]:
        """
        Replace a product in the store, then overwrite its cache entry.

        The replacement must carry the same id; a mismatch is rejected before
        any store or cache access.
        """
        if product.id != product_id:
            logger.warning(
                "Product ID mismatch",
                product_id=product_id,
                body_product_id=product.id,
            )
            return OperationResult.invalid_input(ID_MISMATCH_MESSAGE)

        key = CacheKey.product(product_id)

        with (
            tracer.start_as_current_span("product_cache.update") as span,
            OPERATION_DURATION.labels(operation="update").time(),
        ):
            span.set_attribute("cache.key", key.value)
            span.set_attribute("product.id", product_id)

            try:
                existing = await self.store.find_by_id(product_id)
                if existing is None:
                    return OperationResult.not_found(product_id)

                saved = await self.store.save(product)
                await self._write_cached(key, encode_product(saved))

                logger.info("Product updated", product_id=product_id)
                return OperationResult.ok()

            except ProductNotFoundError:
                return OperationResult.not_found(product_id)

            except Exception as e:
                return self._backend_failure("update", UPDATE_FAILURE_MESSAGE, e, span)

    async def delete(self, product_id: int) -> OperationResult[None]:
        """Remove a product from the store, then invalidate its cache entry."""
        key = CacheKey.product(product_id)

        with (
            tracer.start_as_current_span("product_cache.delete") as span,
            OPERATION_DURATION.labels(operation="delete").time(),
        ):
            span.set_attribute("cache.key", key.value)
            span.set_attribute("product.id", product_id)

            try:
                existing = await self.store.find_by_id(product_id)
                if existing is None:
                    return OperationResult.not_found(product_id)

                await self.store.remove(product_id)
                await self.cache.remove(key.value)
                CACHE_WRITES.labels(key_kind=key.kind.value, action="remove").inc()

                logger.info("Product deleted", product_id=product_id)
                return OperationResult.ok()

            except ProductNotFoundError:
                return OperationResult.not_found(product_id)

            except Exception as e:
                return self._backend_failure("delete", DELETE_FAILURE_MESSAGE, e, span)

    async def _read_cached(
        self, key: CacheKey, decode: Callable[[str], T], span: Span
    ) -> Optional[T]:
        """
        Look up and decode a cache entry.

        Returns None on a miss. An entry that fails to decode, either as
        text or as products, counts as a miss; the caller repopulates it
        from the store.
        """
        try:
            text = await self.cache.get_string(key.value)
            value = decode(text) if text else None
        except ProductDecodeError as e:
            CACHE_DECODE_FAILURES.labels(key_kind=key.kind.value).inc()
            logger.warning(
                "Discarding undecodable cache entry",
                key=key.value,
                error=e.message,
            )
            value = None
        else:
            if value is not None:
                CACHE_HITS.labels(key_kind=key.kind.value).inc()
                span.set_attribute("cache.hit", True)
                logger.debug("Cache hit", key=key.value)
                return value

        CACHE_MISSES.labels(key_kind=key.kind.value).inc()
        span.set_attribute("cache.hit", False)
        logger.debug("Cache miss", key=key.value)
        return None

    async def _write_cached(self, key: CacheKey, payload: str) -> None:
        await self.cache.set_string(key.value, payload, self.entry_options)
        CACHE_WRITES.labels(key_kind=key.kind.value, action="set").inc()

    def _backend_failure(
        self, operation: str, message: str, error: Exception, span: Span
    ) -> OperationResult:
        BACKEND_FAILURES.labels(operation=operation).inc()
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, str(error)))
        logger.error(
            message,
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=True,
        )
        return OperationResult.backend_failure(message, error)
