"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from .cache import ResponseCache
from .config import StorefrontConfig
from .errors import register_error_handlers
from .router import get_storefront_router
from .service import StorefrontService
from .telemetry import init_metrics
from .webhook import WebhookHandler


def configure_logging(config: StorefrontConfig) -> None:
    logging.basicConfig(
        filename=config.log_file,
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(
    config: Optional[StorefrontConfig] = None,
    cache: Optional[ResponseCache] = None,
    client: Optional[Any] = None,
) -> FastAPI:
    """
    Build the storefront API application.

    Args:
        config: Proxy configuration (read from the environment when None)
        cache: Optional response cache instance to inject
        client: Optional upstream HTTP client (mock or test transport)

    Returns:
        FastAPI app with storefront, webhook and health routes
    """
    config = config or StorefrontConfig.from_env()
    configure_logging(config)
    init_metrics()

    service = StorefrontService(config, cache=cache, client=client)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await service.close()

    app = FastAPI(title="Shopify Storefront Proxy", debug=False, lifespan=lifespan)
    app.state.service = service
    app.state.config = config

    register_error_handlers(app, debug=config.debug)
    app.include_router(get_storefront_router(service))
    webhooks = WebhookHandler(service)
    app.state.webhooks = webhooks
    app.include_router(webhooks.get_router())

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
