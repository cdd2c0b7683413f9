"""Webhook handler that invalidates cached catalog data on Shopify events."""

import base64
import hashlib
import hmac
import json
import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Request

from .errors import StorefrontError, ValidationError
from .service import StorefrontService

logger = logging.getLogger("storefront_proxy.webhook")

CATALOG_TOPIC_PREFIXES = ("products/", "collections/")


class WebhookSignatureError(StorefrontError):
    status_code = 401
    code = "INVALID_WEBHOOK_SIGNATURE"

    def __init__(self):
        super().__init__("Invalid webhook signature")


class WebhookHandler:
    """
    Handle Shopify webhooks for catalog changes.

    Cache keys are built from query text and variables, so a product or
    collection event clears the whole response cache.
    """

    def __init__(self, service: StorefrontService, webhook_secret: Optional[str] = None):
        """
        Initialize webhook handler.

        Args:
            service: Storefront service whose cache is invalidated
            webhook_secret: Secret for webhook verification
        """
        self.service = service
        self.webhook_secret = webhook_secret or service.config.shopify.webhook_secret
        self._handlers: Dict[str, list] = {}

    def verify_webhook(self, data: bytes, hmac_header: str) -> bool:
        """
        Verify Shopify webhook signature (base64 HMAC-SHA256 of the raw body).

        Args:
            data: Raw request body
            hmac_header: HMAC header from Shopify

        Returns:
            True if signature is valid
        """
        if not self.webhook_secret:
            return True  # Skip verification if no secret configured

        digest = hmac.new(self.webhook_secret.encode("utf-8"), data, hashlib.sha256).digest()
        computed = base64.b64encode(digest).decode("ascii")
        return hmac.compare_digest(computed, hmac_header or "")

    def on(self, topic: str):
        """
        Decorator to register webhook event handlers.

        Example:
            @webhook_handler.on('products/update')
            async def handle_product_update(product_data):
                ...
        """
        def decorator(func: Callable):
            self._handlers.setdefault(topic, []).append(func)
            return func
        return decorator

    async def handle_webhook(self, topic: str, data: Dict[str, Any]) -> None:
        """Invalidate the cache for catalog topics, then call registered handlers."""
        if topic.startswith(CATALOG_TOPIC_PREFIXES):
            self.service.invalidate_cache()
            logger.info("cache_invalidated", extra={"topic": topic, "resource_id": data.get("id")})

        for handler in self._handlers.get(topic, []):
            await handler(data)

    def get_router(self) -> APIRouter:
        """Create a router with the webhook endpoint."""
        router = APIRouter(tags=["webhooks"])

        @router.post("/webhooks/shopify")
        async def shopify_webhook(request: Request):
            """Endpoint to receive Shopify webhooks."""
            hmac_header = request.headers.get("X-Shopify-Hmac-Sha256", "")
            topic = request.headers.get("X-Shopify-Topic", "")
            body = await request.body()

            if not self.verify_webhook(body, hmac_header):
                raise WebhookSignatureError()

            try:
                data = json.loads(body)
            except ValueError:
                raise ValidationError([{"path": "", "message": "Invalid JSON payload"}])
            if not isinstance(data, dict):
                raise ValidationError([{"path": "", "message": "Webhook payload must be a JSON object"}])

            await self.handle_webhook(topic, data)
            return {"status": "success"}

        return router
