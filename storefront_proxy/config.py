"""Configuration management for the Storefront proxy."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_VERSION = "2024-10"


class ShopifyConfig(BaseModel):
    """Shopify Storefront API connection settings."""
    store_domain: Optional[str] = Field(None, description="Shop domain (e.g., 'mystore.myshopify.com')")
    access_token: Optional[str] = Field(None, description="Storefront API access token")
    api_version: str = Field(DEFAULT_API_VERSION, description="Storefront API version")
    webhook_secret: Optional[str] = Field(None, description="Webhook verification secret")

    @property
    def endpoint(self) -> str:
        return f"https://{self.store_domain}/api/{self.api_version}/graphql.json"


class CacheConfig(BaseModel):
    """Response cache configuration."""
    enabled: bool = Field(True, description="Enable response caching for read queries")
    default_ttl_ms: int = Field(60_000, gt=0, description="Default cache TTL in milliseconds")
    product_ttl_ms: int = Field(60_000, gt=0, description="TTL used for product list/detail queries")
    max_entries: Optional[int] = Field(
        None, gt=0, description="Optional capacity bound; oldest entry is evicted when reached"
    )


class HttpConfig(BaseModel):
    """Upstream HTTP transport configuration."""
    timeout_seconds: float = Field(10.0, gt=0, description="Request timeout for upstream calls")
    read_retries: int = Field(0, ge=0, le=5, description="Retries for cacheable read queries")


class StorefrontConfig(BaseModel):
    """Main configuration for the Storefront proxy."""
    shopify: ShopifyConfig = Field(default_factory=ShopifyConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    environment: Literal["development", "production"] = Field(
        "production", description="Controls whether internal error messages are echoed"
    )
    log_level: str = Field("INFO", description="Logging level")
    log_file: Optional[str] = Field(None, description="Optional log file path")
    sandbox: bool = Field(False, description="Serve canned data instead of calling Shopify")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "shopify": {
                    "store_domain": "mystore.myshopify.com",
                    "access_token": "storefront_token",
                    "api_version": DEFAULT_API_VERSION
                },
                "cache": {
                    "enabled": True,
                    "default_ttl_ms": 60000,
                    "product_ttl_ms": 60000
                },
                "http": {
                    "timeout_seconds": 10.0,
                    "read_retries": 0
                },
                "environment": "production"
            }
        }
    )

    @property
    def debug(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls, **overrides) -> "StorefrontConfig":
        """Build configuration from environment variables (and a .env file)."""
        env = EnvSettings(**overrides)
        environment = env.storefront_env or env.node_env or "production"
        return cls(
            shopify=ShopifyConfig(
                store_domain=env.shopify_store_domain or None,
                access_token=env.shopify_storefront_api_token or None,
                api_version=env.shopify_storefront_api_version or DEFAULT_API_VERSION,
                webhook_secret=env.shopify_webhook_secret or None,
            ),
            cache=CacheConfig(
                default_ttl_ms=env.storefront_cache_ttl_ms,
                product_ttl_ms=env.storefront_cache_ttl_ms,
                max_entries=env.storefront_cache_max_entries,
            ),
            http=HttpConfig(
                timeout_seconds=env.storefront_http_timeout,
                read_retries=env.storefront_read_retries,
            ),
            environment="development" if environment.lower() == "development" else "production",
            log_level=env.storefront_log_level,
            sandbox=env.storefront_sandbox,
        )


class EnvSettings(BaseSettings):
    """Raw environment variables recognised by ``StorefrontConfig.from_env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    shopify_store_domain: str = ""
    shopify_storefront_api_token: str = ""
    shopify_storefront_api_version: str = DEFAULT_API_VERSION
    shopify_webhook_secret: str = ""

    storefront_env: str = ""
    node_env: str = ""
    storefront_cache_ttl_ms: int = 60_000
    storefront_cache_max_entries: Optional[int] = None
    storefront_http_timeout: float = 10.0
    storefront_read_retries: int = 0
    storefront_log_level: str = "INFO"
    storefront_sandbox: bool = False
