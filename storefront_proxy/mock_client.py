"""Mock Storefront API client for sandbox mode."""

import copy
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional


class MockResponse:
    """Minimal response object compatible with StorefrontClient usage."""

    def __init__(self, data: Dict[str, Any], status_code: int = 200, headers: Optional[Dict[str, str]] = None):
        self._data = data
        self.status_code = status_code
        self.reason_phrase = "OK" if status_code < 400 else "Error"
        self.headers = headers or {}

    def json(self) -> Dict[str, Any]:
        return self._data


def _money(amount: Decimal) -> Dict[str, str]:
    return {"amount": f"{amount:.2f}", "currencyCode": "USD"}


SANDBOX_IMAGE = {
    "url": "https://cdn.shopify.com/s/files/sandbox/t-shirt.jpg",
    "altText": "Front",
    "width": 800,
    "height": 800,
}

SANDBOX_VARIANTS = [
    {
        "id": "gid://shopify/ProductVariant/1",
        "title": "Red / Small",
        "availableForSale": True,
        "quantityAvailable": 10,
        "selectedOptions": [{"name": "Color", "value": "Red"}, {"name": "Size", "value": "Small"}],
        "price": _money(Decimal("29.99")),
        "compareAtPrice": _money(Decimal("39.99")),
    },
    {
        "id": "gid://shopify/ProductVariant/2",
        "title": "Blue / Large",
        "availableForSale": False,
        "quantityAvailable": 0,
        "selectedOptions": [{"name": "Color", "value": "Blue"}, {"name": "Size", "value": "Large"}],
        "price": _money(Decimal("34.99")),
        "compareAtPrice": None,
    },
]

SANDBOX_PRODUCT = {
    "id": "gid://shopify/Product/123",
    "title": "Mock T-Shirt",
    "handle": "mock-t-shirt",
    "description": "Soft cotton t-shirt",
    "descriptionHtml": "<p>Soft cotton t-shirt</p>",
    "availableForSale": True,
    "featuredImage": SANDBOX_IMAGE,
    "images": {"edges": [{"node": SANDBOX_IMAGE}]},
    "priceRange": {
        "minVariantPrice": _money(Decimal("29.99")),
        "maxVariantPrice": _money(Decimal("34.99")),
    },
    "variants": {"edges": [{"node": v} for v in SANDBOX_VARIANTS]},
    "seo": {"title": "Mock T-Shirt", "description": "Soft cotton t-shirt"},
}

SANDBOX_CART_ID = "gid://shopify/Cart/sandbox"

_OPERATION_RE = re.compile(r"^\s*(?:query|mutation)\s+(\w+)", re.MULTILINE)


class MockStorefrontClient:
    """
    Mock Storefront API that returns sample data.

    Holds a single in-memory cart so cart flows can be exercised end to end.
    """

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self._lines: List[Dict[str, Any]] = []
        self._cart_exists = False
        self._next_line = 1

    async def request(self, _method: str, _endpoint: str, **kwargs) -> MockResponse:
        payload = kwargs.get("json") or {}
        self.requests.append(payload)
        match = _OPERATION_RE.search(payload.get("query", ""))
        operation = match.group(1) if match else ""
        variables = payload.get("variables") or {}

        handler = getattr(self, f"_op_{operation}", None)
        if handler is None:
            return MockResponse({"errors": [{"message": f"Unknown operation {operation or '<anonymous>'}"}]})
        return MockResponse({"data": handler(variables)})

    async def aclose(self) -> None:
        return None

    def _summary(self) -> Dict[str, Any]:
        keys = ("id", "title", "handle", "availableForSale", "featuredImage", "priceRange")
        return {key: copy.deepcopy(SANDBOX_PRODUCT[key]) for key in keys}

    def _connection(self) -> Dict[str, Any]:
        return {
            "edges": [{"cursor": "sandbox-cursor-1", "node": self._summary()}],
            "pageInfo": {
                "hasNextPage": False,
                "hasPreviousPage": False,
                "startCursor": "sandbox-cursor-1",
                "endCursor": "sandbox-cursor-1",
            },
        }

    def _op_Products(self, _variables):
        return {"products": self._connection()}

    def _op_ProductsByCollection(self, variables):
        if variables.get("handle") != "frontpage":
            return {"collectionByHandle": None}
        return {
            "collectionByHandle": {
                "id": "gid://shopify/Collection/1",
                "title": "Home page",
                "description": "",
                "products": self._connection(),
            }
        }

    def _op_ProductByHandle(self, variables):
        if variables.get("handle") != SANDBOX_PRODUCT["handle"]:
            return {"productByHandle": None}
        return {"productByHandle": copy.deepcopy(SANDBOX_PRODUCT)}

    def _variant(self, merchandise_id: str) -> Optional[Dict[str, Any]]:
        for variant in SANDBOX_VARIANTS:
            if variant["id"] == merchandise_id:
                return variant
        return None

    def _cart(self) -> Dict[str, Any]:
        subtotal = Decimal("0")
        edges = []
        for line in self._lines:
            variant = self._variant(line["merchandiseId"])
            unit = Decimal(variant["price"]["amount"])
            line_total = unit * line["quantity"]
            subtotal += line_total
            edges.append({
                "node": {
                    "id": line["id"],
                    "quantity": line["quantity"],
                    "merchandise": {
                        "id": variant["id"],
                        "title": variant["title"],
                        "selectedOptions": variant["selectedOptions"],
                        "price": variant["price"],
                        "product": {
                            "id": SANDBOX_PRODUCT["id"],
                            "title": SANDBOX_PRODUCT["title"],
                            "handle": SANDBOX_PRODUCT["handle"],
                            "featuredImage": SANDBOX_IMAGE,
                        },
                    },
                    "cost": {"totalAmount": _money(line_total), "amountPerQuantity": _money(unit)},
                }
            })
        return {
            "id": SANDBOX_CART_ID,
            "checkoutUrl": "https://sandbox.myshopify.com/cart/c/sandbox",
            "totalQuantity": sum(line["quantity"] for line in self._lines),
            "lines": {"edges": edges},
            "cost": {
                "subtotalAmount": _money(subtotal),
                "totalAmount": _money(subtotal),
                "totalTaxAmount": None,
            },
        }

    def _add(self, lines) -> List[Dict[str, Any]]:
        errors = []
        for index, line in enumerate(lines):
            if self._variant(line["merchandiseId"]) is None:
                errors.append({
                    "field": ["lines", str(index), "merchandiseId"],
                    "message": "The merchandise with id does not exist.",
                    "code": "INVALID",
                })
                continue
            self._lines.append({
                "id": f"gid://shopify/CartLine/{self._next_line}",
                "merchandiseId": line["merchandiseId"],
                "quantity": line["quantity"],
            })
            self._next_line += 1
        return errors

    def _payload(self, errors) -> Dict[str, Any]:
        return {"cart": None if errors else self._cart(), "userErrors": errors}

    def _op_Cart(self, variables):
        if not self._cart_exists or variables.get("id") != SANDBOX_CART_ID:
            return {"cart": None}
        return {"cart": self._cart()}

    def _op_CartCreate(self, variables):
        self._cart_exists = True
        self._lines = []
        return {"cartCreate": self._payload(self._add(variables.get("lines") or []))}

    def _op_CartLinesAdd(self, variables):
        if variables.get("cartId") != SANDBOX_CART_ID or not self._cart_exists:
            return {"cartLinesAdd": self._payload([
                {"field": ["cartId"], "message": "The specified cart does not exist.", "code": "INVALID"}
            ])}
        return {"cartLinesAdd": self._payload(self._add(variables.get("lines") or []))}

    def _op_CartLinesUpdate(self, variables):
        updates = {line["id"]: line["quantity"] for line in variables.get("lines") or []}
        for line in self._lines:
            if line["id"] in updates:
                line["quantity"] = updates[line["id"]]
        self._lines = [line for line in self._lines if line["quantity"] > 0]
        return {"cartLinesUpdate": self._payload([])}

    def _op_CartLinesRemove(self, variables):
        removed = set(variables.get("lineIds") or [])
        self._lines = [line for line in self._lines if line["id"] not in removed]
        return {"cartLinesRemove": self._payload([])}
