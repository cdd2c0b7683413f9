"""Pydantic models for Shopify Storefront API responses."""

from decimal import Decimal, InvalidOperation
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator


class ShopifyMoney(BaseModel):
    """Shopify money amount. ``amount`` is kept as the upstream decimal string."""
    amount: str
    currency_code: str = Field(alias="currencyCode")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("amount")
    @classmethod
    def _non_negative_decimal(cls, value: str) -> str:
        try:
            parsed = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"amount is not a decimal string: {value!r}")
        if not parsed.is_finite() or parsed < 0:
            raise ValueError(f"amount must be a non-negative decimal: {value!r}")
        return value


class ShopifyImage(BaseModel):
    """Shopify image data."""
    url: str
    alt_text: Optional[str] = Field(None, alias="altText")
    width: Optional[int] = None
    height: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class ShopifySEO(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class ShopifySelectedOption(BaseModel):
    name: str
    value: str


class ShopifyPriceRange(BaseModel):
    min_variant_price: ShopifyMoney = Field(alias="minVariantPrice")
    max_variant_price: ShopifyMoney = Field(alias="maxVariantPrice")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyPageInfo(BaseModel):
    """Connection page info. Cursors are opaque and never rewritten."""
    has_next_page: bool = Field(alias="hasNextPage")
    has_previous_page: bool = Field(False, alias="hasPreviousPage")
    start_cursor: Optional[str] = Field(None, alias="startCursor")
    end_cursor: Optional[str] = Field(None, alias="endCursor")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyVariant(BaseModel):
    """Shopify product variant."""
    id: str
    title: str
    available_for_sale: bool = Field(alias="availableForSale")
    selected_options: List[ShopifySelectedOption] = Field(default_factory=list, alias="selectedOptions")
    price: ShopifyMoney
    compare_at_price: Optional[ShopifyMoney] = Field(None, alias="compareAtPrice")
    quantity_available: Optional[int] = Field(None, alias="quantityAvailable")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyImageEdge(BaseModel):
    node: ShopifyImage


class ShopifyImageConnection(BaseModel):
    edges: List[ShopifyImageEdge] = Field(default_factory=list)


class ShopifyVariantEdge(BaseModel):
    node: ShopifyVariant


class ShopifyVariantConnection(BaseModel):
    edges: List[ShopifyVariantEdge] = Field(default_factory=list)


class ShopifyProduct(BaseModel):
    """
    Shopify product node.

    List queries select only the summary fields, so the detail-only fields
    are optional here.
    """
    id: str
    title: str
    handle: str
    available_for_sale: bool = Field(alias="availableForSale")
    featured_image: Optional[ShopifyImage] = Field(None, alias="featuredImage")
    price_range: Optional[ShopifyPriceRange] = Field(None, alias="priceRange")
    description: Optional[str] = None
    description_html: Optional[str] = Field(None, alias="descriptionHtml")
    images: ShopifyImageConnection = Field(default_factory=ShopifyImageConnection)
    variants: ShopifyVariantConnection = Field(default_factory=ShopifyVariantConnection)
    seo: Optional[ShopifySEO] = None

    model_config = ConfigDict(populate_by_name=True)


class ShopifyProductEdge(BaseModel):
    cursor: Optional[str] = None
    node: ShopifyProduct


class ShopifyProductConnection(BaseModel):
    edges: List[ShopifyProductEdge] = Field(default_factory=list)
    page_info: ShopifyPageInfo = Field(alias="pageInfo")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyCollection(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    products: ShopifyProductConnection


class ShopifyCartProduct(BaseModel):
    id: str
    title: str
    handle: str
    featured_image: Optional[ShopifyImage] = Field(None, alias="featuredImage")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyMerchandise(BaseModel):
    """The product variant referenced by a cart line."""
    id: str
    title: str
    product: ShopifyCartProduct
    selected_options: List[ShopifySelectedOption] = Field(default_factory=list, alias="selectedOptions")
    price: ShopifyMoney

    model_config = ConfigDict(populate_by_name=True)


class ShopifyCartLineCost(BaseModel):
    total_amount: ShopifyMoney = Field(alias="totalAmount")
    amount_per_quantity: Optional[ShopifyMoney] = Field(None, alias="amountPerQuantity")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyCartLine(BaseModel):
    id: str
    quantity: int
    merchandise: ShopifyMerchandise
    cost: ShopifyCartLineCost


class ShopifyCartLineEdge(BaseModel):
    node: ShopifyCartLine


class ShopifyCartLineConnection(BaseModel):
    edges: List[ShopifyCartLineEdge] = Field(default_factory=list)


class ShopifyCartCost(BaseModel):
    subtotal_amount: ShopifyMoney = Field(alias="subtotalAmount")
    total_amount: ShopifyMoney = Field(alias="totalAmount")
    total_tax_amount: Optional[ShopifyMoney] = Field(None, alias="totalTaxAmount")

    model_config = ConfigDict(populate_by_name=True)


class ShopifyCart(BaseModel):
    """Shopify cart. ``id`` and ``checkout_url`` are opaque upstream identifiers."""
    id: str
    checkout_url: str = Field(alias="checkoutUrl")
    total_quantity: int = Field(alias="totalQuantity")
    lines: ShopifyCartLineConnection = Field(default_factory=ShopifyCartLineConnection)
    cost: ShopifyCartCost

    model_config = ConfigDict(populate_by_name=True)


class ShopifyCartUserError(BaseModel):
    field: Optional[List[str]] = None
    message: str
    code: Optional[str] = None


class ShopifyCartPayload(BaseModel):
    """Common payload shape of cartCreate / cartLinesAdd / cartLinesUpdate / cartLinesRemove."""
    cart: Optional[ShopifyCart] = None
    user_errors: List[ShopifyCartUserError] = Field(default_factory=list, alias="userErrors")

    model_config = ConfigDict(populate_by_name=True)
