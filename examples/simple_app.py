from storefront_proxy import StorefrontConfig, create_app

config = StorefrontConfig(
    shopify={
        "store_domain": "mystore.myshopify.com",
        "access_token": "storefront_token",
        "api_version": "2024-10",
    },
)

app = create_app(config)

# Run: uvicorn examples.simple_app:app --reload
