"""
Correlation ID Middleware

Request tracking across the product API. Reuses a correlation ID from the
request headers when present, otherwise generates one, binds it into the
structlog context for the lifetime of the request and echoes it back on the
response.
"""

import re
import uuid
from typing import Optional, Callable, Awaitable

import structlog
from fastapi import Request
from opentelemetry import trace
from starlette.types import ASGIApp
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

logger = structlog.get_logger(__name__)

CORRELATION_HEADERS = (
    "x-correlation-id",
    "correlation-id",
    "x-request-id",
    "request-id",
)

_VALID_CORRELATION_ID = re.compile(r"^[a-zA-Z0-9\-_\.]{8,255}$")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware for managing correlation IDs in HTTP requests.

    Generates or extracts correlation IDs, binds them to structlog
    contextvars and the current span, and adds them to response headers.
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "x-correlation-id",
        validate_format: bool = True,
    ):
        """
        Initialize correlation ID middleware.

        Args:
            app: ASGI application
            header_name: Header name for correlation ID
            validate_format: Whether to validate correlation ID format
        """
        super().__init__(app)
        self.header_name = header_name.lower()
        self.validate_format = validate_format

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[StarletteResponse]],
    ) -> StarletteResponse:
        correlation_id = self._extract_or_generate_correlation_id(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("correlation_id", correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
            response.headers[self.header_name] = correlation_id

            logger.info("Request completed", status_code=response.status_code)
            return response

        except Exception as e:
            logger.error(
                "Unexpected error during request processing",
                error=str(e),
                exc_info=True,
            )
            raise

        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")

    def _extract_or_generate_correlation_id(self, request: Request) -> str:
        """Extract correlation ID from request or generate new one."""
        correlation_id = get_request_correlation_id(request)

        if correlation_id and self.validate_format:
            if not _VALID_CORRELATION_ID.match(correlation_id):
                logger.warning(
                    "Invalid correlation ID format in request header, generating new one",
                    received_correlation_id=correlation_id,
                )
                correlation_id = None

        return correlation_id or str(uuid.uuid4())


def get_request_correlation_id(request: Request) -> Optional[str]:
    """
    Helper function to extract correlation ID from request.

    Args:
        request: HTTP request

    Returns:
        Correlation ID if present, None otherwise
    """
    for header_name in CORRELATION_HEADERS:
        if header_name in request.headers:
            correlation_id = request.headers[header_name].strip()
            if correlation_id:
                return correlation_id

    return None


__all__ = [
    "CorrelationIdMiddleware",
    "get_request_correlation_id",
]
