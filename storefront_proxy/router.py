"""FastAPI router exposing the storefront JSON API."""

from fastapi import APIRouter, Request

from .service import StorefrontService
from .validation import (
    CartCreateBody,
    CartIdParams,
    CartLinesAddBody,
    CartLinesRemoveBody,
    CartLinesUpdateBody,
    ProductHandleParams,
    ProductListQuery,
    validate_body,
    validate_query,
    validate_route_param,
)


def get_storefront_router(service: StorefrontService) -> APIRouter:
    """
    Create a FastAPI router for the storefront endpoints.

    Handlers validate input, call the service and return mapped JSON.
    Failures propagate as ``StorefrontError`` to the app-level handlers
    installed by ``register_error_handlers``.

    Args:
        service: Storefront service instance

    Returns:
        APIRouter with async endpoints
    """
    router = APIRouter(prefix="/api", tags=["storefront"])

    def dump(model):
        return model.model_dump(mode="json", by_alias=True)

    @router.get("/products")
    async def list_products(request: Request):
        """Paginated product listing."""
        query = validate_query(request.query_params, ProductListQuery)
        return dump(await service.list_products(query))

    @router.get("/products/{handle}")
    async def get_product(handle: str):
        """Product detail by handle."""
        params = validate_route_param({"handle": handle}, ProductHandleParams)
        return dump(await service.get_product(params.handle))

    @router.post("/cart", status_code=201)
    async def create_cart(request: Request):
        """Create a cart, optionally with initial lines."""
        raw = await request.body()
        lines = None
        if raw.strip():
            lines = validate_body(raw, CartCreateBody).lines
        return dump(await service.create_cart(lines))

    # Cart IDs are upstream GIDs containing slashes, so the ID segment uses
    # the path convertor and the more specific routes are registered first.
    @router.post("/cart/{cart_id:path}/lines")
    async def add_cart_lines(cart_id: str, request: Request):
        params = validate_route_param({"cartId": cart_id}, CartIdParams)
        body = validate_body(await request.body(), CartLinesAddBody)
        return dump(await service.add_lines(params.cart_id, body.lines))

    @router.patch("/cart/{cart_id:path}/lines")
    async def update_cart_lines(cart_id: str, request: Request):
        """Update line quantities (0 removes a line)."""
        params = validate_route_param({"cartId": cart_id}, CartIdParams)
        body = validate_body(await request.body(), CartLinesUpdateBody)
        return dump(await service.update_lines(params.cart_id, body.lines))

    @router.delete("/cart/{cart_id:path}/lines")
    async def remove_cart_lines(cart_id: str, request: Request):
        params = validate_route_param({"cartId": cart_id}, CartIdParams)
        body = validate_body(await request.body(), CartLinesRemoveBody)
        return dump(await service.remove_lines(params.cart_id, body.line_ids))

    @router.post("/cart/{cart_id:path}/checkout")
    async def checkout(cart_id: str):
        """Return the upstream checkout URL for the cart."""
        params = validate_route_param({"cartId": cart_id}, CartIdParams)
        return dump(await service.get_checkout_url(params.cart_id))

    @router.get("/cart/{cart_id:path}")
    async def get_cart(cart_id: str):
        params = validate_route_param({"cartId": cart_id}, CartIdParams)
        return dump(await service.get_cart(params.cart_id))

    return router
