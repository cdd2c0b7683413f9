"""Data models for Shopify Storefront payloads and the flat API contracts."""

from .shopify_models import (
    ShopifyMoney,
    ShopifyImage,
    ShopifyVariant,
    ShopifyProduct,
    ShopifyProductConnection,
    ShopifyCollection,
    ShopifyCart,
    ShopifyCartLine,
    ShopifyCartUserError,
    ShopifyCartPayload,
)
from .api_models import (
    Money,
    Image,
    PageInfo,
    ProductListItem,
    ProductListResponse,
    Variant,
    ProductDetailResponse,
    CartLineItem,
    CartResponse,
    CheckoutResponse,
)

__all__ = [
    "ShopifyMoney",
    "ShopifyImage",
    "ShopifyVariant",
    "ShopifyProduct",
    "ShopifyProductConnection",
    "ShopifyCollection",
    "ShopifyCart",
    "ShopifyCartLine",
    "ShopifyCartUserError",
    "ShopifyCartPayload",
    "Money",
    "Image",
    "PageInfo",
    "ProductListItem",
    "ProductListResponse",
    "Variant",
    "ProductDetailResponse",
    "CartLineItem",
    "CartResponse",
    "CheckoutResponse",
]
