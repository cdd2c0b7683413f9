"""Example usage of the Storefront service without the HTTP layer."""

import asyncio
import json
from storefront_proxy import StorefrontService, StorefrontConfig
from storefront_proxy.validation import CartLineInput, ProductListQuery


async def main():
    """Example: list products, show one, and put it in a cart."""

    # Credentials come from SHOPIFY_STORE_DOMAIN / SHOPIFY_STOREFRONT_API_TOKEN
    config = StorefrontConfig.from_env()

    async with StorefrontService(config) as service:
        page = await service.list_products(ProductListQuery(limit=5))
        print(f"Fetched {len(page.items)} products")
        for item in page.items:
            print(f"- {item.title} ({item.handle})")

        if not page.items:
            return

        product = await service.get_product(page.items[0].handle)
        print(json.dumps(product.model_dump(mode="json", by_alias=True), indent=2))

        variant = product.variants[0]
        cart = await service.add_to_cart(
            None, [CartLineInput(merchandise_id=variant.id, quantity=1)]
        )
        print(f"\nCart {cart.id}: {cart.total_quantity} item(s), total {cart.cost.total.amount}")
        print(f"Checkout: {cart.checkout_url}")


if __name__ == "__main__":
    asyncio.run(main())
