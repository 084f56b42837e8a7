"""
Repository Pattern Implementation

All product store access goes through repositories.
"""

from .base import BaseRepository
from .product import ProductRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
]
