"""Shopify Storefront GraphQL client with response caching and typed failures."""

import logging
import re
from time import perf_counter
from typing import Any, Dict, Optional

import backoff
import httpx

from .cache import ResponseCache
from .config import StorefrontConfig
from .errors import (
    ConfigurationError,
    EmptyResponseError,
    NetworkError,
    UpstreamGraphQLError,
)
from .telemetry import get_cache_lookup_counter, get_upstream_duration_histogram

logger = logging.getLogger("storefront_proxy.client")

ACCESS_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"

_OPERATION_RE = re.compile(r"^\s*(query|mutation)\s+(\w+)", re.MULTILINE)


def operation_name(query: str) -> str:
    match = _OPERATION_RE.search(query)
    return match.group(2) if match else "anonymous"


def is_mutation(query: str) -> bool:
    match = _OPERATION_RE.search(query)
    return bool(match and match.group(1) == "mutation")


class StorefrontClient:
    """
    Execute one Storefront API operation per call.

    The response cache is injected rather than global, so each app (or
    test) owns its own instance. Only callers passing ``cacheable=True``
    touch the cache, and mutations are refused that option.
    """

    def __init__(
        self,
        config: StorefrontConfig,
        cache: Optional[ResponseCache] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Proxy configuration
            cache: Response cache shared by cacheable queries (None disables caching)
            client: Optional HTTP client (e.g., MockStorefrontClient or an
                ``httpx.AsyncClient`` with a test transport)
        """
        self.config = config
        self.cache = cache

        if client is not None:
            self.client = client
            self._owns_client = False
        else:
            self.client = httpx.AsyncClient(timeout=config.http.timeout_seconds)
            self._owns_client = True

        self._duration_histogram = get_upstream_duration_histogram()
        self._cache_lookups = get_cache_lookup_counter()

    async def close(self):
        """Close HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _check_config(self) -> None:
        if self.config.sandbox:
            return
        shopify = self.config.shopify
        if not shopify.store_domain:
            raise ConfigurationError("SHOPIFY_STORE_DOMAIN environment variable is not set")
        if not shopify.access_token:
            raise ConfigurationError("SHOPIFY_STOREFRONT_API_TOKEN environment variable is not set")

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        cacheable: bool = False,
        cache_ttl_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Run a GraphQL query or mutation and return its ``data`` payload.

        Args:
            query: GraphQL document
            variables: Operation variables
            cacheable: Serve/store the response through the response cache
            cache_ttl_ms: TTL for the stored entry (cache default if None)

        Raises:
            ConfigurationError: store domain or access token missing
            NetworkError: transport failure or non-2xx status
            UpstreamGraphQLError: response carried GraphQL errors
            EmptyResponseError: response carried neither data nor errors
        """
        if cacheable and is_mutation(query):
            raise ValueError("Mutations cannot be served from the response cache")

        operation = operation_name(query)
        cache_key = None
        if cacheable and self.cache is not None:
            cache_key = self.cache.generate_key(query, variables)
            cached = self.cache.get(cache_key)
            if cached is not None:
                self._cache_lookups.add(1, attributes={"result": "hit"})
                logger.debug("cache_hit", extra={"operation": operation})
                return cached
            self._cache_lookups.add(1, attributes={"result": "miss"})
            logger.debug("cache_miss", extra={"operation": operation})

        self._check_config()

        send = self._send
        retries = self.config.http.read_retries
        if cacheable and retries > 0:
            send = backoff.on_exception(
                backoff.expo,
                NetworkError,
                max_tries=retries + 1,
                giveup=lambda exc: not exc.retryable,
                logger=logger,
            )(self._send)

        data = await send(query, variables, operation)

        if cache_key is not None:
            self.cache.set(cache_key, data, cache_ttl_ms)

        return data

    async def _send(self, query: str, variables: Optional[Dict[str, Any]], operation: str) -> Dict[str, Any]:
        shopify = self.config.shopify
        headers = {
            ACCESS_TOKEN_HEADER: shopify.access_token,
            "Content-Type": "application/json",
        }
        payload = {"query": query, "variables": variables or {}}

        start = perf_counter()
        try:
            response = await self.client.request("POST", shopify.endpoint, json=payload, headers=headers)
        except httpx.RequestError as exc:
            logger.error("upstream_error", extra={"operation": operation, "error": str(exc)})
            raise NetworkError(f"Shopify Storefront API request failed: {exc}") from exc
        finally:
            duration_ms = (perf_counter() - start) * 1000
            self._duration_histogram.record(duration_ms, attributes={"operation": operation})

        logger.info(
            "upstream_request",
            extra={"operation": operation, "status": response.status_code, "duration_ms": duration_ms},
        )

        if not 200 <= response.status_code < 300:
            reason = getattr(response, "reason_phrase", "") or ""
            raise NetworkError(
                f"Shopify Storefront API request failed: {response.status_code} {reason}".rstrip(),
                upstream_status=response.status_code,
                reason=reason,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise NetworkError(
                "Shopify Storefront API returned a non-JSON body",
                upstream_status=response.status_code,
            ) from exc

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = [
                err.get("message", str(err)) if isinstance(err, dict) else str(err)
                for err in errors
            ]
            logger.error("upstream_error", extra={"operation": operation, "errors": messages})
            raise UpstreamGraphQLError(messages)

        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            raise EmptyResponseError()

        return data

    def clear_cache(self) -> None:
        """Drop every cached response."""
        if self.cache is not None:
            self.cache.clear()
