"""
Unit tests for settings validation and logging setup.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from app.core.config import Settings
from app.core.logging import add_service_context, configure_logging


class TestSettings:
    """Test Settings defaults and validators."""

    def test_defaults(self):
        settings = Settings(DATABASE_URL="postgresql+asyncpg://user:pw@db:5432/products")

        assert settings.REDIS_INSTANCE_NAME == "RedisCachingDemo_"
        assert settings.CACHE_SLIDING_EXPIRATION_SECONDS == 300
        assert settings.REDIS_URL == "redis://localhost:6379"
        assert not settings.uses_sqlite

    def test_sqlite_url(self):
        settings = Settings(DATABASE_URL="sqlite+aiosqlite:///./products.db")

        assert settings.uses_sqlite

    def test_rejects_sync_driver(self):
        with pytest.raises(ValidationError, match="async driver"):
            Settings(DATABASE_URL="postgresql://user:pw@db:5432/products")

    def test_rejects_unknown_environment(self):
        with pytest.raises(ValidationError, match="ENVIRONMENT"):
            Settings(ENVIRONMENT="qa")

    def test_cache_backend_normalized(self):
        assert Settings(CACHE_BACKEND="Memory").CACHE_BACKEND == "memory"

        with pytest.raises(ValidationError):
            Settings(CACHE_BACKEND="memcached")

    def test_log_level_normalized(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_sliding_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(CACHE_SLIDING_EXPIRATION_SECONDS=0)


class TestLogging:
    """Test structlog configuration."""

    def test_service_context_processor(self):
        processor = add_service_context("product-cache-api")

        event = processor(None, "info", {"event": "hello"})

        assert event["service"] == "product-cache-api"

    def test_configure_logging_json(self, capsys):
        configure_logging("product-cache-api", log_level="INFO", json_output=True)
        try:
            structlog.get_logger("test").info("configured", answer=42)
            output = capsys.readouterr().out
        finally:
            structlog.reset_defaults()
            logging.getLogger().handlers.clear()

        assert '"event": "configured"' in output
        assert '"service": "product-cache-api"' in output
