from storefront_proxy.errors import (
    CartNotFoundError,
    CartOperationError,
    ConfigurationError,
    EmptyResponseError,
    NetworkError,
    ProductNotFoundError,
    UpstreamGraphQLError,
    UserRuleError,
    ValidationError,
    error_envelope,
    format_error,
)
from storefront_proxy.models.shopify_models import ShopifyCartUserError


def test_envelope_omits_absent_fields():
    assert error_envelope("Boom") == {"error": {"message": "Boom"}}
    assert error_envelope("Boom", "X", []) == {"error": {"message": "Boom", "code": "X", "details": []}}


def test_validation_error_lists_field_paths():
    issues = [{"path": "limit", "message": "too big"}]
    status, body = format_error(ValidationError(issues))
    assert status == 400
    assert body == {"error": {"message": "Validation failed", "code": "VALIDATION_ERROR", "details": issues}}


def test_not_found_errors():
    status, body = format_error(ProductNotFoundError("t-shirt"))
    assert status == 404
    assert body["error"]["code"] == "PRODUCT_NOT_FOUND"
    assert "t-shirt" in body["error"]["message"]

    status, body = format_error(CartNotFoundError("gid://shopify/Cart/1"))
    assert status == 404
    assert body["error"]["code"] == "CART_NOT_FOUND"


def test_user_rule_error_formats_upstream_user_errors():
    exc = UserRuleError.from_upstream([
        ShopifyCartUserError(field=["lines", "0", "quantity"], message="Not enough stock", code="INVALID"),
        ShopifyCartUserError(field=None, message="Cart is locked", code="INVALID"),
    ])
    status, body = format_error(exc)
    assert status == 400
    assert body["error"]["code"] == "CART_ERROR"
    assert body["error"]["details"] == [
        {"field": "lines.0.quantity", "message": "Not enough stock", "code": "INVALID"},
        {"field": None, "message": "Cart is locked", "code": "INVALID"},
    ]


def test_cart_operation_error():
    status, body = format_error(CartOperationError("Failed to create cart", "CART_CREATE_FAILED"))
    assert status == 500
    assert body == {"error": {"message": "Failed to create cart", "code": "CART_CREATE_FAILED"}}


def test_upstream_errors_hide_details_in_production():
    status, body = format_error(UpstreamGraphQLError(["Throttled"]))
    assert status == 502
    assert body == {"error": {"message": "Shopify API error", "code": "SHOPIFY_API_ERROR"}}

    status, body = format_error(UpstreamGraphQLError(["Throttled"]), debug=True)
    assert body["error"]["details"] == {"originalMessage": "Shopify GraphQL errors: Throttled"}


def test_empty_response_is_an_upstream_error():
    status, body = format_error(EmptyResponseError())
    assert status == 502
    assert body["error"]["code"] == "SHOPIFY_API_ERROR"


def test_network_error():
    status, body = format_error(NetworkError("Shopify Storefront API request failed: 500", 500), debug=True)
    assert status == 502
    assert body["error"]["code"] == "SHOPIFY_NETWORK_ERROR"
    assert body["error"]["message"] == "Failed to communicate with Shopify"
    assert body["error"]["details"]["originalMessage"].endswith("500")


def test_configuration_error_never_leaks_internals():
    exc = ConfigurationError("SHOPIFY_STOREFRONT_API_TOKEN environment variable is not set")
    for debug in (False, True):
        status, body = format_error(exc, debug=debug)
        assert status == 500
        assert body == {"error": {"message": "Server configuration error", "code": "CONFIG_ERROR"}}


def test_unknown_exceptions_become_internal_errors():
    status, body = format_error(KeyError("products"))
    assert status == 500
    assert body == {"error": {"message": "An unexpected error occurred", "code": "INTERNAL_ERROR"}}

    _, body = format_error(RuntimeError("kaboom"), debug=True)
    assert body["error"]["details"] == {"originalMessage": "kaboom"}
