"""Error taxonomy and the uniform JSON error envelope."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("storefront_proxy.errors")


class StorefrontError(Exception):
    """Base class for every failure that maps onto an API error response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    public_message: Optional[str] = None

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(StorefrontError):
    """Client input failed validation. ``issues`` holds one entry per field."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, issues: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(message, details=issues)
        self.issues = issues


class NotFoundError(StorefrontError):
    status_code = 404
    code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, handle: str):
        super().__init__(f'Product with handle "{handle}" not found')
        self.handle = handle


class CartNotFoundError(NotFoundError):
    code = "CART_NOT_FOUND"

    def __init__(self, cart_id: str):
        super().__init__(f'Cart with ID "{cart_id}" not found')
        self.cart_id = cart_id


class CollectionNotFoundError(NotFoundError):
    code = "COLLECTION_NOT_FOUND"

    def __init__(self, handle: str):
        super().__init__(f'Collection with handle "{handle}" not found')
        self.handle = handle


class UserRuleError(StorefrontError):
    """The upstream platform rejected a cart mutation on business rules."""

    status_code = 400
    code = "CART_ERROR"

    def __init__(self, user_errors: List[Dict[str, Any]], message: str = "Cart operation failed"):
        super().__init__(message, details=user_errors)
        self.user_errors = user_errors

    @classmethod
    def from_upstream(cls, user_errors) -> "UserRuleError":
        return cls([
            {
                "field": ".".join(err.field) if err.field else None,
                "message": err.message,
                "code": err.code,
            }
            for err in user_errors
        ])


class CartOperationError(StorefrontError):
    """A cart mutation returned neither a cart nor user errors."""

    status_code = 500

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


class UpstreamGraphQLError(StorefrontError):
    """The GraphQL response carried a non-empty ``errors`` array."""

    status_code = 502
    code = "SHOPIFY_API_ERROR"
    public_message = "Shopify API error"

    def __init__(self, messages: List[str]):
        super().__init__(f"Shopify GraphQL errors: {', '.join(messages)}")
        self.messages = messages


class EmptyResponseError(UpstreamGraphQLError):
    """A 2xx response without ``data`` and without ``errors``."""

    def __init__(self):
        StorefrontError.__init__(self, "No data returned from Shopify Storefront API")
        self.messages = []


class NetworkError(StorefrontError):
    """Transport failure or non-2xx upstream response."""

    status_code = 502
    code = "SHOPIFY_NETWORK_ERROR"
    public_message = "Failed to communicate with Shopify"

    def __init__(self, message: str, upstream_status: Optional[int] = None, reason: str = ""):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.reason = reason

    @property
    def retryable(self) -> bool:
        return self.upstream_status is None or self.upstream_status == 429 or self.upstream_status >= 500


class ConfigurationError(StorefrontError):
    """Required connection settings are missing."""

    status_code = 500
    code = "CONFIG_ERROR"
    public_message = "Server configuration error"


class InternalError(StorefrontError):
    status_code = 500
    code = "INTERNAL_ERROR"
    public_message = "An unexpected error occurred"


HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_envelope(message: str, code: Optional[str] = None, details: Any = None) -> Dict[str, Any]:
    """Build the fixed ``{error: {message, code?, details?}}`` body."""
    error: Dict[str, Any] = {"message": message}
    if code:
        error["code"] = code
    if details is not None:
        error["details"] = details
    return {"error": error}


def format_error(exc: BaseException, debug: bool = False) -> Tuple[int, Dict[str, Any]]:
    """
    Classify any exception into an HTTP status and error envelope.

    Args:
        exc: The failure raised while handling a request
        debug: Attach upstream/internal messages as ``details.originalMessage``

    Returns:
        Tuple of (status code, response body)
    """
    if isinstance(exc, ConfigurationError):
        return exc.status_code, error_envelope(exc.public_message, exc.code)

    if isinstance(exc, (UpstreamGraphQLError, NetworkError, InternalError)):
        details = {"originalMessage": exc.message} if debug else None
        return exc.status_code, error_envelope(exc.public_message, exc.code, details)

    if isinstance(exc, StorefrontError):
        return exc.status_code, error_envelope(exc.message, exc.code, exc.details)

    details = {"originalMessage": str(exc)} if debug else None
    return 500, error_envelope(InternalError.public_message, InternalError.code, details)


def error_response(exc: BaseException, debug: bool = False) -> JSONResponse:
    status_code, body = format_error(exc, debug)
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """
    Install the top-level error boundary on a FastAPI application.

    Known failures are converted by an exception handler; anything else is
    caught by an HTTP middleware so no request ever ends without the
    standard envelope.
    """

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "request_failed",
            extra={"path": request.url.path, "code": exc.code, "status": exc.status_code},
        )
        return error_response(exc, debug)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(str(exc.detail), code),
            headers=getattr(exc, "headers", None),
        )

    @app.middleware("http")
    async def unexpected_error_boundary(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("request_failed", extra={"path": request.url.path, "code": "INTERNAL_ERROR"})
            return error_response(exc, debug)
