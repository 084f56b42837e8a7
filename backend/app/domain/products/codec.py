"""
Product Serialization Codec

Converts products and product lists to and from the JSON text stored in the
distributed cache. Anything that does not decode into well-formed products
raises ProductDecodeError; callers treat that as a cache miss.
"""

from typing import List

from pydantic import TypeAdapter, ValidationError

from .entities import CachedProduct, Product
from .exceptions import ProductDecodeError

_product_list_adapter = TypeAdapter(List[CachedProduct])


def encode_product(product: Product) -> str:
    """Serialize a single product."""
    return CachedProduct.from_product(product).model_dump_json(by_alias=True)


def decode_product(text: str) -> Product:
    """Deserialize a single product."""
    try:
        return CachedProduct.model_validate_json(text).to_product()
    except ValidationError as e:
        raise ProductDecodeError(
            f"Cached product payload is not valid: {e.error_count()} error(s)",
            original_error=e,
        )


def encode_products(products: List[Product]) -> str:
    """Serialize a product list."""
    cached = [CachedProduct.from_product(p) for p in products]
    return _product_list_adapter.dump_json(cached, by_alias=True).decode("utf-8")


def decode_products(text: str) -> List[Product]:
    """Deserialize a product list."""
    try:
        return [c.to_product() for c in _product_list_adapter.validate_json(text)]
    except ValidationError as e:
        raise ProductDecodeError(
            f"Cached product list payload is not valid: {e.error_count()} error(s)",
            original_error=e,
        )
