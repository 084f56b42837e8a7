"""
Product Repository

SQLAlchemy implementation of the authoritative ProductStore.
Rows never leave this module; callers get Product snapshots.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.models import Product as ProductModel
from app.domain.products.entities import Product
from app.domain.products.exceptions import ProductNotFoundError
from app.domain.products.repository_interfaces import ProductStore
from .base import BaseRepository

logger = structlog.get_logger(__name__)

MUTABLE_FIELDS = ("name", "category", "price", "quantity")


class ProductRepository(BaseRepository, ProductStore):
    """Product store backed by the products table."""

    def __init__(self, session: AsyncSession):
        """Initialize product repository."""
        super().__init__(session, ProductModel)

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        row = await self.get_row(product_id)
        if row is None:
            return None
        return Product.model_validate(row)

    async def list_all(self) -> List[Product]:
        rows = await self.list_rows()
        return [Product.model_validate(row) for row in rows]

    async def save(self, product: Product) -> Product:
        """
        Overwrite every mutable field of the stored row and commit.

        Returns the row as re-read after the commit, so column rounding is
        reflected.

        Raises:
            ProductNotFoundError: If the row no longer exists
        """
        row = await self.get_row(product.id)
        if row is None:
            raise ProductNotFoundError(product.id)

        for field in MUTABLE_FIELDS:
            setattr(row, field, getattr(product, field))

        await self.commit("updated", product.id)
        await self.session.refresh(row)
        return Product.model_validate(row)

    async def remove(self, product_id: int) -> None:
        """
        Delete the row and commit.

        Raises:
            ProductNotFoundError: If the row no longer exists
        """
        row = await self.get_row(product_id)
        if row is None:
            raise ProductNotFoundError(product_id)

        await self.session.delete(row)
        await self.commit("deleted", product_id)
