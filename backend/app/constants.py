"""
Product Cache API Global Constants

Centralized location for system-wide constants used across the application.
"""

# Application Constants
APP_NAME = "Product Cache API"
APP_VERSION = "0.1.0"

# Cache key namespace, shared with entries written by earlier deployments
ALL_PRODUCTS_CACHE_KEY = "GET_ALL_PRODUCTS"
PRODUCT_CACHE_KEY_PREFIX = "Product_"

# Default sliding expiration window (5 minutes)
DEFAULT_SLIDING_EXPIRATION_SECONDS = 300

API_PREFIX = "/api/products"
