"""Pydantic models for the flat, frontend-facing API contracts."""

from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class Money(BaseModel):
    """Money amount passed through from Shopify unmodified."""
    amount: str
    currency_code: str = Field(alias="currencyCode")

    model_config = ConfigDict(populate_by_name=True)


class Image(BaseModel):
    url: str
    alt_text: Optional[str] = Field(None, alias="altText")
    width: Optional[int] = None
    height: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class SelectedOption(BaseModel):
    name: str
    value: str


class SEO(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class PriceRange(BaseModel):
    min_price: Money = Field(alias="minPrice")
    max_price: Money = Field(alias="maxPrice")

    model_config = ConfigDict(populate_by_name=True)


class PageInfo(BaseModel):
    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: Optional[str] = Field(None, alias="endCursor")

    model_config = ConfigDict(populate_by_name=True)


class ProductListItem(BaseModel):
    """One product of a paginated listing."""
    id: str
    title: str
    handle: str
    featured_image: Optional[Image] = Field(None, alias="featuredImage")
    price_range: Optional[PriceRange] = Field(None, alias="priceRange")
    available_for_sale: bool = Field(alias="availableForSale")

    model_config = ConfigDict(populate_by_name=True)


class ProductListResponse(BaseModel):
    items: List[ProductListItem] = Field(default_factory=list)
    page_info: PageInfo = Field(alias="pageInfo")

    model_config = ConfigDict(populate_by_name=True)


class Variant(BaseModel):
    id: str
    title: str
    available_for_sale: bool = Field(alias="availableForSale")
    selected_options: List[SelectedOption] = Field(default_factory=list, alias="selectedOptions")
    price: Money
    compare_at_price: Optional[Money] = Field(None, alias="compareAtPrice")
    quantity_available: Optional[int] = Field(None, alias="quantityAvailable")

    model_config = ConfigDict(populate_by_name=True)


class ProductDetailResponse(BaseModel):
    """Full product detail with images and variants unwrapped in upstream order."""
    id: str
    title: str
    handle: str
    description: Optional[str] = None
    description_html: Optional[str] = Field(None, alias="descriptionHtml")
    available_for_sale: bool = Field(alias="availableForSale")
    images: List[Image] = Field(default_factory=list)
    variants: List[Variant] = Field(default_factory=list)
    seo: SEO = Field(default_factory=SEO)

    model_config = ConfigDict(populate_by_name=True)


class CartLineItem(BaseModel):
    """Flattened cart line. ``total_price`` is computed upstream."""
    id: str
    quantity: int
    merchandise_id: str = Field(alias="merchandiseId")
    title: str
    product_title: str = Field(alias="productTitle")
    product_handle: str = Field(alias="productHandle")
    featured_image: Optional[Image] = Field(None, alias="featuredImage")
    selected_options: List[SelectedOption] = Field(default_factory=list, alias="selectedOptions")
    price: Money
    total_price: Money = Field(alias="totalPrice")

    model_config = ConfigDict(populate_by_name=True)


class CartCost(BaseModel):
    subtotal: Money
    total: Money
    tax: Optional[Money] = None


class CartResponse(BaseModel):
    id: str
    checkout_url: str = Field(alias="checkoutUrl")
    total_quantity: int = Field(alias="totalQuantity")
    lines: List[CartLineItem] = Field(default_factory=list)
    cost: CartCost

    model_config = ConfigDict(populate_by_name=True)


class CheckoutResponse(BaseModel):
    checkout_url: str = Field(alias="checkoutUrl")

    model_config = ConfigDict(populate_by_name=True)
