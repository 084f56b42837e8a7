"""
Product Cache Metrics

Prometheus collectors for cache-aside behavior and store access. Collectors
are module-level so they are registered once per process.
"""

from prometheus_client import Counter, Histogram

CACHE_HITS = Counter(
    "product_cache_hits_total",
    "Product cache lookups served from the distributed cache",
    ["key_kind"],
)

CACHE_MISSES = Counter(
    "product_cache_misses_total",
    "Product cache lookups that fell through to the store",
    ["key_kind"],
)

CACHE_DECODE_FAILURES = Counter(
    "product_cache_decode_failures_total",
    "Cached payloads that could not be decoded and were treated as misses",
    ["key_kind"],
)

CACHE_WRITES = Counter(
    "product_cache_writes_total",
    "Product cache entries written or invalidated",
    ["key_kind", "action"],
)

BACKEND_FAILURES = Counter(
    "product_backend_failures_total",
    "Product operations that failed because the cache or store raised",
    ["operation"],
)

OPERATION_DURATION = Histogram(
    "product_operation_duration_seconds",
    "Duration of product cache-aside operations",
    ["operation"],
)

DB_SESSION_DURATION = Histogram(
    "product_db_session_duration_seconds",
    "Time a database session stays checked out",
)
