from urllib.parse import quote

import httpx
import pytest

from storefront_proxy.app import create_app
from storefront_proxy.cache import ResponseCache

from payloads import Upstream, cart_node, cart_payload, make_config, product_detail_node, products_data

CART_ID = "gid://shopify/Cart/abc"
CART_PATH = f"/api/cart/{quote(CART_ID, safe='')}"


async def call(upstream, method, url, cache=None, **kwargs):
    config_overrides = kwargs.pop("config", {})
    app = create_app(make_config(**config_overrides), cache=cache, client=upstream.client())
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


@pytest.mark.asyncio
async def test_list_products_returns_flat_page():
    upstream = Upstream(products_data(count=2))

    response = await call(upstream, "GET", "/api/products", params={"limit": "2"})

    assert response.status_code == 200
    body = response.json()
    assert [item["handle"] for item in body["items"]] == ["product-1", "product-2"]
    assert body["pageInfo"] == {"hasNextPage": True, "endCursor": "c2"}
    assert upstream.calls[0]["body"]["variables"] == {
        "first": 2,
        "after": None,
        "query": None,
        "sortKey": None,
        "reverse": False,
    }


@pytest.mark.asyncio
async def test_cursor_and_search_are_forwarded():
    upstream = Upstream(products_data(count=1, has_next_page=False))

    await call(
        upstream, "GET", "/api/products",
        params={"cursor": "c2", "search": "shirt", "sortKey": "PRICE", "reverse": "true"},
    )

    variables = upstream.calls[0]["body"]["variables"]
    assert variables["after"] == "c2"
    assert variables["query"] == "shirt"
    assert variables["sortKey"] == "PRICE"
    assert variables["reverse"] is True
    assert variables["first"] == 20


@pytest.mark.asyncio
async def test_invalid_limit_is_rejected_before_upstream():
    upstream = Upstream(products_data())

    response = await call(upstream, "GET", "/api/products", params={"limit": "101"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Validation failed"
    assert error["details"][0]["path"] == "limit"
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_catalog_reads_are_cached():
    upstream = Upstream(products_data())
    cache = ResponseCache()
    app = create_app(make_config(), cache=cache, client=upstream.client())

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        first = await client.get("/api/products")
        second = await client.get("/api/products")

    assert first.json() == second.json()
    assert len(upstream.calls) == 1
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_collection_listing():
    upstream = Upstream({"collectionByHandle": {"id": "gid://shopify/Collection/1", **products_data(count=1)}})

    response = await call(upstream, "GET", "/api/products", params={"collection": "frontpage"})

    assert response.status_code == 200
    assert len(response.json()["items"]) == 1
    assert upstream.calls[0]["body"]["variables"]["handle"] == "frontpage"


@pytest.mark.asyncio
async def test_unknown_collection_is_404():
    upstream = Upstream({"collectionByHandle": None})

    response = await call(upstream, "GET", "/api/products", params={"collection": "nope"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "COLLECTION_NOT_FOUND"


@pytest.mark.asyncio
async def test_product_detail():
    upstream = Upstream({"productByHandle": product_detail_node()})

    response = await call(upstream, "GET", "/api/products/product-7")

    assert response.status_code == 200
    body = response.json()
    assert body["handle"] == "product-7"
    assert [v["title"] for v in body["variants"]] == ["Large", "Small"]
    assert upstream.calls[0]["body"]["variables"] == {"handle": "product-7"}


@pytest.mark.asyncio
async def test_missing_product_is_404():
    upstream = Upstream({"productByHandle": None})

    response = await call(upstream, "GET", "/api/products/ghost")

    assert response.status_code == 404
    assert response.json() == {
        "error": {"message": 'Product with handle "ghost" not found', "code": "PRODUCT_NOT_FOUND"}
    }


@pytest.mark.asyncio
async def test_get_cart():
    upstream = Upstream({"cart": cart_node()})

    response = await call(upstream, "GET", CART_PATH)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == CART_ID
    assert body["cost"]["subtotal"] == {"amount": "27.00", "currencyCode": "USD"}
    assert upstream.calls[0]["body"]["variables"] == {"id": CART_ID}


@pytest.mark.asyncio
async def test_null_cart_is_404():
    upstream = Upstream({"cart": None})

    response = await call(upstream, "GET", CART_PATH)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "CART_NOT_FOUND"


@pytest.mark.asyncio
async def test_cart_reads_are_never_cached():
    upstream = Upstream({"cart": cart_node()})
    cache = ResponseCache()

    await call(upstream, "GET", CART_PATH, cache=cache)

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_create_cart_without_body():
    upstream = Upstream({"cartCreate": cart_payload(cart_node())})

    response = await call(upstream, "POST", "/api/cart")

    assert response.status_code == 201
    assert response.json()["id"] == CART_ID
    assert upstream.calls[0]["body"]["variables"] == {}


@pytest.mark.asyncio
async def test_create_cart_with_lines():
    upstream = Upstream({"cartCreate": cart_payload(cart_node())})
    lines = [{"merchandiseId": "gid://shopify/ProductVariant/1", "quantity": 3}]

    response = await call(upstream, "POST", "/api/cart", json={"lines": lines})

    assert response.status_code == 201
    assert upstream.calls[0]["body"]["variables"] == {"lines": lines}


@pytest.mark.asyncio
async def test_create_cart_with_invalid_body():
    upstream = Upstream({"cartCreate": cart_payload(cart_node())})

    response = await call(upstream, "POST", "/api/cart", json={"lines": [{"merchandiseId": "x", "quantity": 0}]})

    assert response.status_code == 400
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_create_cart_without_cart_or_errors():
    upstream = Upstream({"cartCreate": cart_payload(None)})

    response = await call(upstream, "POST", "/api/cart")

    assert response.status_code == 500
    assert response.json() == {"error": {"message": "Failed to create cart", "code": "CART_CREATE_FAILED"}}


@pytest.mark.asyncio
async def test_add_lines():
    upstream = Upstream({"cartLinesAdd": cart_payload(cart_node())})
    cache = ResponseCache()
    lines = [{"merchandiseId": "gid://shopify/ProductVariant/1", "quantity": 3}]

    response = await call(upstream, "POST", f"{CART_PATH}/lines", cache=cache, json={"lines": lines})

    assert response.status_code == 200
    assert response.json()["totalQuantity"] == 3
    assert upstream.calls[0]["body"]["variables"] == {"cartId": CART_ID, "lines": lines}
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_add_lines_with_zero_quantity_never_reaches_upstream():
    upstream = Upstream({"cartLinesAdd": cart_payload(cart_node())})
    lines = [{"merchandiseId": "gid://shopify/ProductVariant/1", "quantity": 0}]

    response = await call(upstream, "POST", f"{CART_PATH}/lines", json={"lines": lines})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["path"] == "lines.0.quantity"
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_add_lines_rejected_by_business_rules():
    user_errors = [{"field": ["lines", "0", "quantity"], "message": "Only 2 items left", "code": "INVALID"}]
    upstream = Upstream({"cartLinesAdd": cart_payload(None, user_errors)})
    lines = [{"merchandiseId": "gid://shopify/ProductVariant/1", "quantity": 5}]

    response = await call(upstream, "POST", f"{CART_PATH}/lines", json={"lines": lines})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "CART_ERROR"
    assert error["details"] == [{"field": "lines.0.quantity", "message": "Only 2 items left", "code": "INVALID"}]


@pytest.mark.asyncio
async def test_update_lines_allows_zero_quantity():
    upstream = Upstream({"cartLinesUpdate": cart_payload(cart_node())})

    response = await call(
        upstream, "PATCH", f"{CART_PATH}/lines",
        json={"lines": [{"lineId": "gid://shopify/CartLine/1", "quantity": 0}]},
    )

    assert response.status_code == 200
    assert upstream.calls[0]["body"]["variables"] == {
        "cartId": CART_ID,
        "lines": [{"id": "gid://shopify/CartLine/1", "quantity": 0}],
    }


@pytest.mark.asyncio
async def test_remove_lines():
    upstream = Upstream({"cartLinesRemove": cart_payload(cart_node())})

    response = await call(
        upstream, "DELETE", f"{CART_PATH}/lines",
        content=b'{"lineIds": ["gid://shopify/CartLine/1"]}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert upstream.calls[0]["body"]["variables"] == {
        "cartId": CART_ID,
        "lineIds": ["gid://shopify/CartLine/1"],
    }


@pytest.mark.asyncio
async def test_remove_lines_requires_ids():
    upstream = Upstream({"cartLinesRemove": cart_payload(cart_node())})

    response = await call(
        upstream, "DELETE", f"{CART_PATH}/lines",
        content=b'{"lineIds": []}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_checkout_url():
    upstream = Upstream({"cart": cart_node()})

    response = await call(upstream, "POST", f"{CART_PATH}/checkout")

    assert response.status_code == 200
    assert response.json() == {"checkoutUrl": "https://mystore.myshopify.com/cart/c/abc?key=xyz"}


@pytest.mark.asyncio
async def test_missing_credentials_is_config_error():
    upstream = Upstream(products_data())

    response = await call(
        upstream, "GET", "/api/products",
        config={"shopify": {"store_domain": "mystore.myshopify.com"}},
    )

    assert response.status_code == 500
    assert response.json() == {"error": {"message": "Server configuration error", "code": "CONFIG_ERROR"}}
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_upstream_errors_are_masked_in_production():
    upstream = Upstream(httpx.Response(200, json={"errors": [{"message": "Throttled"}]}))

    response = await call(upstream, "GET", "/api/products")

    assert response.status_code == 502
    assert response.json() == {"error": {"message": "Shopify API error", "code": "SHOPIFY_API_ERROR"}}


@pytest.mark.asyncio
async def test_upstream_errors_are_detailed_in_development():
    upstream = Upstream(httpx.Response(200, json={"errors": [{"message": "Throttled"}]}))

    response = await call(upstream, "GET", "/api/products", config={"environment": "development"})

    assert response.status_code == 502
    assert response.json()["error"]["details"] == {"originalMessage": "Shopify GraphQL errors: Throttled"}


@pytest.mark.asyncio
async def test_upstream_http_failure():
    upstream = Upstream(httpx.Response(503))

    response = await call(upstream, "GET", "/api/products")

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "SHOPIFY_NETWORK_ERROR"


@pytest.mark.asyncio
async def test_unexpected_failure_uses_the_error_envelope():
    # data without the "products" field the handler expects
    upstream = Upstream({"shop": {"name": "Test"}})

    response = await call(upstream, "GET", "/api/products")

    assert response.status_code == 500
    assert response.json() == {"error": {"message": "An unexpected error occurred", "code": "INTERNAL_ERROR"}}


@pytest.mark.asyncio
async def test_wrong_method_uses_the_error_envelope():
    upstream = Upstream(products_data())

    response = await call(upstream, "POST", "/api/products")

    assert response.status_code == 405
    assert response.json() == {"error": {"message": "Method Not Allowed", "code": "METHOD_NOT_ALLOWED"}}
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_unknown_path_uses_the_error_envelope():
    upstream = Upstream(products_data())

    response = await call(upstream, "GET", "/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": {"message": "Not Found", "code": "NOT_FOUND"}}
