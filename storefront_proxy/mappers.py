"""
Pure transformations from Shopify connection-shaped payloads to flat API
contracts.

Mappers never re-sort, filter, or touch money amounts: they only reshape.
Cursors are copied verbatim.
"""

from typing import Any, Dict, Optional, Union

from .models.shopify_models import (
    ShopifyCart,
    ShopifyCartLine,
    ShopifyImage,
    ShopifyMoney,
    ShopifyProduct,
    ShopifyProductConnection,
)
from .models.api_models import (
    CartCost,
    CartLineItem,
    CartResponse,
    Image,
    Money,
    PageInfo,
    PriceRange,
    ProductDetailResponse,
    ProductListItem,
    ProductListResponse,
    SEO,
    SelectedOption,
    Variant,
)


def _money(money: Optional[ShopifyMoney]) -> Optional[Money]:
    if money is None:
        return None
    return Money(amount=money.amount, currency_code=money.currency_code)


def _image(image: Optional[ShopifyImage]) -> Optional[Image]:
    if image is None:
        return None
    return Image(url=image.url, alt_text=image.alt_text, width=image.width, height=image.height)


def map_product_to_list_item(product: ShopifyProduct) -> ProductListItem:
    """Map one product node of a listing to a list item."""
    price_range = None
    if product.price_range is not None:
        price_range = PriceRange(
            min_price=_money(product.price_range.min_variant_price),
            max_price=_money(product.price_range.max_variant_price),
        )
    return ProductListItem(
        id=product.id,
        title=product.title,
        handle=product.handle,
        featured_image=_image(product.featured_image),
        price_range=price_range,
        available_for_sale=product.available_for_sale,
    )


def map_product_list(connection: Union[ShopifyProductConnection, Dict[str, Any]]) -> ProductListResponse:
    """
    Flatten a product connection into ``{items, pageInfo}``.

    Args:
        connection: Product connection model or raw ``products`` payload

    Returns:
        List response with items in upstream order
    """
    if not isinstance(connection, ShopifyProductConnection):
        connection = ShopifyProductConnection.model_validate(connection)

    return ProductListResponse(
        items=[map_product_to_list_item(edge.node) for edge in connection.edges],
        page_info=PageInfo(
            has_next_page=connection.page_info.has_next_page,
            end_cursor=connection.page_info.end_cursor,
        ),
    )


def map_product_detail(product: Union[ShopifyProduct, Dict[str, Any]]) -> ProductDetailResponse:
    """Unwrap the image and variant connections of a single product."""
    if not isinstance(product, ShopifyProduct):
        product = ShopifyProduct.model_validate(product)

    images = [_image(edge.node) for edge in product.images.edges]
    variants = [
        Variant(
            id=variant.id,
            title=variant.title,
            available_for_sale=variant.available_for_sale,
            selected_options=[
                SelectedOption(name=opt.name, value=opt.value) for opt in variant.selected_options
            ],
            price=_money(variant.price),
            compare_at_price=_money(variant.compare_at_price),
            quantity_available=variant.quantity_available,
        )
        for variant in (edge.node for edge in product.variants.edges)
    ]
    seo = SEO(**product.seo.model_dump()) if product.seo else SEO()

    return ProductDetailResponse(
        id=product.id,
        title=product.title,
        handle=product.handle,
        description=product.description,
        description_html=product.description_html,
        available_for_sale=product.available_for_sale,
        images=images,
        variants=variants,
        seo=seo,
    )


def map_cart_line_item(line: ShopifyCartLine) -> CartLineItem:
    merchandise = line.merchandise
    return CartLineItem(
        id=line.id,
        quantity=line.quantity,
        merchandise_id=merchandise.id,
        title=merchandise.title,
        product_title=merchandise.product.title,
        product_handle=merchandise.product.handle,
        featured_image=_image(merchandise.product.featured_image),
        selected_options=[
            SelectedOption(name=opt.name, value=opt.value) for opt in merchandise.selected_options
        ],
        price=_money(merchandise.price),
        total_price=_money(line.cost.total_amount),
    )


def map_cart(cart: Union[ShopifyCart, Dict[str, Any]]) -> CartResponse:
    """Unwrap cart lines and rename the cost fields; amounts pass through."""
    if not isinstance(cart, ShopifyCart):
        cart = ShopifyCart.model_validate(cart)

    return CartResponse(
        id=cart.id,
        checkout_url=cart.checkout_url,
        total_quantity=cart.total_quantity,
        lines=[map_cart_line_item(edge.node) for edge in cart.lines.edges],
        cost=CartCost(
            subtotal=_money(cart.cost.subtotal_amount),
            total=_money(cart.cost.total_amount),
            tax=_money(cart.cost.total_tax_amount),
        ),
    )
