"""
Product Domain Exceptions
"""

from typing import Optional


class ProductDomainException(Exception):
    """Base exception for product catalog errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ProductNotFoundError(ProductDomainException):
    """Raised by the store when a product row does not exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            message=f"Product with ID {product_id} not found.",
            error_code="PRODUCT_NOT_FOUND",
        )


class ProductDecodeError(ProductDomainException):
    """Raised when a cached payload cannot be turned back into products."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message=message, error_code="PRODUCT_DECODE_ERROR")
        if original_error:
            self.__cause__ = original_error
