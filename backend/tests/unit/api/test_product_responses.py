"""
Unit tests for the operation-result to HTTP response adapter.
"""

import json

import pytest
from fastapi import HTTPException
from fastapi.responses import JSONResponse, Response

from app.api.endpoints.products import to_response
from app.domain.products.results import OperationResult


class TestToResponse:
    """Test to_response status mapping."""

    def test_ok_with_value_passes_value_through(self, sample_products):
        assert to_response(OperationResult.ok(sample_products)) == sample_products

    def test_ok_with_empty_list_is_not_empty_body(self):
        assert to_response(OperationResult.ok([])) == []

    def test_ok_without_value(self):
        response = to_response(OperationResult.ok())

        assert isinstance(response, Response)
        assert response.status_code == 200
        assert response.body == b""

    def test_not_found(self):
        with pytest.raises(HTTPException) as exc_info:
            to_response(OperationResult.not_found(3))

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Product with ID 3 not found."

    def test_invalid_input(self):
        with pytest.raises(HTTPException) as exc_info:
            to_response(OperationResult.invalid_input("Product ID mismatch."))

        assert exc_info.value.status_code == 400

    def test_backend_failure(self):
        response = to_response(
            OperationResult.backend_failure(
                "An error occurred while deleting the product.",
                RuntimeError("connection reset"),
            )
        )

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        assert json.loads(response.body) == {
            "message": "An error occurred while deleting the product.",
            "details": "connection reset",
        }
