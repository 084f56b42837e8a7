"""
Product Operation Results

Explicit outcome values returned by the cache-aside service. The HTTP layer
converts them to responses in exactly one place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class OperationStatus(str, Enum):
    """Outcome of a product operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    BACKEND_FAILURE = "backend_failure"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Result of a single product operation."""

    status: OperationStatus
    value: Optional[T] = None
    message: Optional[str] = None
    details: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "OperationResult[T]":
        return cls(OperationStatus.OK, value=value)

    @classmethod
    def not_found(cls, product_id: int) -> "OperationResult[T]":
        return cls(
            OperationStatus.NOT_FOUND,
            message=f"Product with ID {product_id} not found.",
        )

    @classmethod
    def invalid_input(cls, message: str) -> "OperationResult[T]":
        return cls(OperationStatus.INVALID_INPUT, message=message)

    @classmethod
    def backend_failure(cls, message: str, error: Exception) -> "OperationResult[T]":
        return cls(OperationStatus.BACKEND_FAILURE, message=message, details=str(error))

    @property
    def succeeded(self) -> bool:
        return self.status is OperationStatus.OK
