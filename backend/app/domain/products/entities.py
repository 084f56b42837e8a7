"""
Product Domain Entities

The product snapshot passed between the store, the cache and the API.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class Product(BaseModel):
    """Product catalog entry as seen by the domain and the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Store-assigned product identifier")
    name: str = Field(..., description="Product name")
    category: str = Field(..., description="Product category")
    price: float = Field(..., description="Unit price")
    quantity: int = Field(..., description="Quantity in stock")


class CachedProduct(Product):
    """
    Cache payload shape of a product.

    Members are written in PascalCase so entries stay readable by every
    service instance sharing the cache; snake_case names are accepted on read.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    @classmethod
    def from_product(cls, product: Product) -> "CachedProduct":
        return cls(**product.model_dump())

    def to_product(self) -> Product:
        return Product(**self.model_dump())
