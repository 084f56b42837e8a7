"""
Product Cache Monitoring Module

Prometheus collectors for cache hits, misses, writes and backend failures.
"""

from .metrics import (
    BACKEND_FAILURES,
    CACHE_DECODE_FAILURES,
    CACHE_HITS,
    CACHE_MISSES,
    CACHE_WRITES,
    DB_SESSION_DURATION,
    OPERATION_DURATION,
)

__all__ = [
    "BACKEND_FAILURES",
    "CACHE_DECODE_FAILURES",
    "CACHE_HITS",
    "CACHE_MISSES",
    "CACHE_WRITES",
    "DB_SESSION_DURATION",
    "OPERATION_DURATION",
]
