"""
Unit tests for Product Domain Models.

Tests cache key naming, entry expiration options, the cache payload codec
and operation results.
"""

import json
from datetime import timedelta

import pytest

from app.domain.products.codec import (
    decode_product,
    decode_products,
    encode_product,
    encode_products,
)
from app.domain.products.entities import Product
from app.domain.products.exceptions import ProductDecodeError, ProductNotFoundError
from app.domain.products.results import OperationResult, OperationStatus
from app.domain.products.value_objects import (
    CacheEntryOptions,
    CacheKey,
    CacheKeyKind,
)


class TestCacheKey:
    """Test CacheKey value object."""

    def test_all_products_key(self):
        """Test the product-list key is the fixed sentinel."""
        key = CacheKey.all_products()

        assert key.value == "GET_ALL_PRODUCTS"
        assert key.kind is CacheKeyKind.LIST
        assert str(key) == "GET_ALL_PRODUCTS"

    def test_product_key(self):
        """Test per-product key naming."""
        key = CacheKey.product(42)

        assert key.value == "Product_42"
        assert key.kind is CacheKeyKind.ITEM

    def test_empty_key_rejected(self):
        """Test empty keys are rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            CacheKey("", CacheKeyKind.ITEM)

    def test_whitespace_key_rejected(self):
        """Test keys with whitespace are rejected."""
        with pytest.raises(ValueError, match="whitespace"):
            CacheKey("Product 1", CacheKeyKind.ITEM)

    def test_keys_are_immutable(self):
        """Test CacheKey is frozen."""
        key = CacheKey.product(1)
        with pytest.raises(AttributeError):
            key.value = "Product_2"


class TestCacheEntryOptions:
    """Test CacheEntryOptions value object."""

    def test_sliding_options(self):
        options = CacheEntryOptions.sliding(300)

        assert options.sliding_expiration == timedelta(minutes=5)
        assert options.sliding_seconds == 300
        assert options.absolute_seconds is None
        assert options.initial_ttl_seconds() == 300

    def test_initial_ttl_capped_by_absolute(self):
        """Test the absolute lifetime caps the first TTL."""
        options = CacheEntryOptions(
            sliding_expiration=timedelta(seconds=300),
            absolute_expiration_relative_to_now=timedelta(seconds=60),
        )

        assert options.initial_ttl_seconds() == 60

    def test_requires_some_expiration(self):
        with pytest.raises(ValueError, match="At least one expiration"):
            CacheEntryOptions()

    def test_rejects_non_positive_window(self):
        with pytest.raises(ValueError, match="must be positive"):
            CacheEntryOptions.sliding(0)


class TestProductCodec:
    """Test the cache payload codec."""

    @pytest.fixture
    def laptop(self):
        return Product(
            id=1, name="Laptop", category="Electronics", price=999.99, quantity=10
        )

    def test_encode_product_uses_pascal_case(self, laptop):
        """Test cached payload member names."""
        payload = json.loads(encode_product(laptop))

        assert payload == {
            "Id": 1,
            "Name": "Laptop",
            "Category": "Electronics",
            "Price": 999.99,
            "Quantity": 10,
        }

    def test_decode_product(self, laptop):
        text = '{"Id": 1, "Name": "Laptop", "Category": "Electronics", "Price": 999.99, "Quantity": 10}'

        assert decode_product(text) == laptop

    def test_decode_accepts_field_names(self, laptop):
        """Test snake_case members are accepted on read."""
        text = json.dumps(laptop.model_dump())

        assert decode_product(text) == laptop

    def test_product_list_round_trip(self, sample_products):
        assert decode_products(encode_products(sample_products)) == sample_products

    def test_empty_list_round_trip(self):
        assert encode_products([]) == "[]"
        assert decode_products("[]") == []

    @pytest.mark.parametrize(
        "text",
        [
            "{not json",
            '{"Id": 1, "Name": "Laptop"}',
            '{"Id": "one", "Name": "Laptop", "Category": "E", "Price": 1, "Quantity": 1}',
            "[]",
        ],
    )
    def test_decode_product_rejects_malformed(self, text):
        """Test malformed payloads raise ProductDecodeError."""
        with pytest.raises(ProductDecodeError) as exc_info:
            decode_product(text)

        assert exc_info.value.error_code == "PRODUCT_DECODE_ERROR"
        assert exc_info.value.__cause__ is not None

    def test_decode_products_rejects_object(self):
        with pytest.raises(ProductDecodeError):
            decode_products('{"Id": 1}')


class TestOperationResult:
    """Test OperationResult construction."""

    def test_ok(self):
        result = OperationResult.ok([1, 2])

        assert result.status is OperationStatus.OK
        assert result.value == [1, 2]
        assert result.succeeded

    def test_not_found_message(self):
        result = OperationResult.not_found(7)

        assert result.status is OperationStatus.NOT_FOUND
        assert result.message == "Product with ID 7 not found."
        assert not result.succeeded

    def test_backend_failure_carries_error_text(self):
        result = OperationResult.backend_failure(
            "An error occurred while retrieving products.",
            RuntimeError("connection refused"),
        )

        assert result.status is OperationStatus.BACKEND_FAILURE
        assert result.message == "An error occurred while retrieving products."
        assert result.details == "connection refused"

    def test_not_found_error_matches_result_message(self):
        error = ProductNotFoundError(7)

        assert error.message == OperationResult.not_found(7).message
        assert error.product_id == 7
