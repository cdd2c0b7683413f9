"""
Shopify Storefront API Proxy

A thin server-side layer that validates browser requests, calls the
Shopify Storefront GraphQL API, and returns flat JSON contracts.
"""

__version__ = "0.1.0"

from .app import create_app
from .cache import ResponseCache
from .client import StorefrontClient
from .config import StorefrontConfig
from .mock_client import MockStorefrontClient
from .router import get_storefront_router
from .service import StorefrontService

__all__ = [
    "create_app",
    "ResponseCache",
    "StorefrontClient",
    "StorefrontConfig",
    "MockStorefrontClient",
    "get_storefront_router",
    "StorefrontService",
]
