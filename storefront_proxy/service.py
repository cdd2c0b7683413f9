"""Storefront operations: query construction, upstream calls and mapping."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .cache import ResponseCache
from .client import StorefrontClient
from .config import StorefrontConfig
from .errors import (
    CartNotFoundError,
    CartOperationError,
    CollectionNotFoundError,
    ProductNotFoundError,
    UserRuleError,
)
from .mappers import map_cart, map_product_detail, map_product_list
from .mock_client import MockStorefrontClient
from .models.api_models import CartResponse, CheckoutResponse, ProductDetailResponse, ProductListResponse
from .models.shopify_models import ShopifyCartPayload
from .queries import (
    CART_CREATE_MUTATION,
    CART_LINES_ADD_MUTATION,
    CART_LINES_REMOVE_MUTATION,
    CART_LINES_UPDATE_MUTATION,
    CART_QUERY,
    PRODUCT_BY_HANDLE_QUERY,
    PRODUCTS_BY_COLLECTION_QUERY,
    PRODUCTS_QUERY,
)
from .validation import CartLineInput, CartLineUpdateInput, ProductListQuery

logger = logging.getLogger("storefront_proxy.service")


class StorefrontService:
    """
    Main entry point used by the route handlers and the CLI.

    This class handles:
    - Building GraphQL variables from validated input
    - Caching catalog reads (never carts)
    - Translating null lookups and cart user errors into typed failures
    - Mapping upstream payloads to the flat API contracts
    """

    def __init__(
        self,
        config: StorefrontConfig,
        cache: Optional[ResponseCache] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Proxy configuration
            cache: Response cache; built from ``config.cache`` when omitted
            client: Optional HTTP client (e.g., MockStorefrontClient)
        """
        self.config = config

        if cache is None and config.cache.enabled:
            cache = ResponseCache(
                default_ttl_ms=config.cache.default_ttl_ms,
                max_entries=config.cache.max_entries,
            )
        if client is None and config.sandbox:
            client = MockStorefrontClient()

        self.graphql = StorefrontClient(config, cache=cache, client=client)

    @property
    def cache(self) -> Optional[ResponseCache]:
        return self.graphql.cache

    async def close(self):
        await self.graphql.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def list_products(self, query: Optional[ProductListQuery] = None) -> ProductListResponse:
        """
        Fetch one page of products, from the catalog or a single collection.

        Args:
            query: Validated list parameters (defaults when None)

        Returns:
            Items in upstream order and the verbatim page info
        """
        query = query or ProductListQuery()
        ttl = self.config.cache.product_ttl_ms

        if query.collection:
            data = await self.graphql.execute(
                PRODUCTS_BY_COLLECTION_QUERY,
                {"handle": query.collection, "first": query.limit, "after": query.cursor},
                cacheable=True,
                cache_ttl_ms=ttl,
            )
            collection = data.get("collectionByHandle")
            if not collection:
                raise CollectionNotFoundError(query.collection)
            return map_product_list(collection["products"])

        data = await self.graphql.execute(
            PRODUCTS_QUERY, query.to_variables(), cacheable=True, cache_ttl_ms=ttl
        )
        return map_product_list(data["products"])

    async def get_product(self, handle: str) -> ProductDetailResponse:
        """Fetch a product by handle."""
        data = await self.graphql.execute(
            PRODUCT_BY_HANDLE_QUERY,
            {"handle": handle},
            cacheable=True,
            cache_ttl_ms=self.config.cache.product_ttl_ms,
        )
        product = data.get("productByHandle")
        if not product:
            raise ProductNotFoundError(handle)
        return map_product_detail(product)

    async def get_cart(self, cart_id: str) -> CartResponse:
        data = await self.graphql.execute(CART_QUERY, {"id": cart_id})
        cart = data.get("cart")
        if not cart:
            raise CartNotFoundError(cart_id)
        return map_cart(cart)

    async def get_checkout_url(self, cart_id: str) -> CheckoutResponse:
        """Resolve the upstream checkout URL for a cart."""
        data = await self.graphql.execute(CART_QUERY, {"id": cart_id})
        cart = data.get("cart")
        if not cart:
            raise CartNotFoundError(cart_id)
        return CheckoutResponse(checkout_url=cart["checkoutUrl"])

    async def create_cart(self, lines: Optional[Sequence[CartLineInput]] = None) -> CartResponse:
        variables: Dict[str, Any] = {}
        if lines:
            variables["lines"] = [line.to_variables() for line in lines]

        data = await self.graphql.execute(CART_CREATE_MUTATION, variables)
        return self._cart_from_payload(data["cartCreate"], "Failed to create cart", "CART_CREATE_FAILED")

    async def add_lines(self, cart_id: str, lines: Sequence[CartLineInput]) -> CartResponse:
        data = await self.graphql.execute(
            CART_LINES_ADD_MUTATION,
            {"cartId": cart_id, "lines": [line.to_variables() for line in lines]},
        )
        return self._cart_from_payload(
            data["cartLinesAdd"], "Failed to add lines to cart", "CART_LINES_ADD_FAILED"
        )

    async def update_lines(self, cart_id: str, lines: Sequence[CartLineUpdateInput]) -> CartResponse:
        """Set line quantities; a quantity of 0 removes the line upstream."""
        data = await self.graphql.execute(
            CART_LINES_UPDATE_MUTATION,
            {"cartId": cart_id, "lines": [line.to_variables() for line in lines]},
        )
        return self._cart_from_payload(
            data["cartLinesUpdate"], "Failed to update cart lines", "CART_LINES_UPDATE_FAILED"
        )

    async def remove_lines(self, cart_id: str, line_ids: List[str]) -> CartResponse:
        data = await self.graphql.execute(
            CART_LINES_REMOVE_MUTATION,
            {"cartId": cart_id, "lineIds": list(line_ids)},
        )
        return self._cart_from_payload(
            data["cartLinesRemove"], "Failed to remove cart lines", "CART_LINES_REMOVE_FAILED"
        )

    async def add_to_cart(self, cart_id: Optional[str], lines: Sequence[CartLineInput]) -> CartResponse:
        """
        Create-or-append: start a new cart when there is no cart ID yet,
        otherwise append the lines to the existing cart.
        """
        if not cart_id:
            cart = await self.create_cart()
            cart_id = cart.id
        return await self.add_lines(cart_id, lines)

    def invalidate_cache(self) -> None:
        """Invalidate every cached catalog response."""
        self.graphql.clear_cache()

    def _cart_from_payload(self, payload: Dict[str, Any], failure_message: str, failure_code: str) -> CartResponse:
        result = ShopifyCartPayload.model_validate(payload)
        if result.user_errors:
            logger.warning(
                "cart_user_error",
                extra={"code": failure_code, "errors": [err.message for err in result.user_errors]},
            )
            raise UserRuleError.from_upstream(result.user_errors)
        if result.cart is None:
            raise CartOperationError(failure_message, failure_code)
        return map_cart(result.cart)
