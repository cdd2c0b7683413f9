"""
Request validation schemas and helpers.

Every helper raises ``ValidationError`` listing one ``{path, message}``
entry per offending field before any upstream call is made.
"""

from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

M = TypeVar("M", bound=BaseModel)

PRODUCT_SORT_KEYS = (
    "TITLE",
    "PRICE",
    "BEST_SELLING",
    "CREATED_AT",
    "UPDATED_AT",
    "PRODUCT_TYPE",
    "VENDOR",
)

ProductSortKey = Literal[
    "TITLE", "PRICE", "BEST_SELLING", "CREATED_AT", "UPDATED_AT", "PRODUCT_TYPE", "VENDOR"
]


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProductListQuery(_Schema):
    """Query parameters of ``GET /api/products``."""
    cursor: Optional[str] = None
    limit: int = Field(20, ge=1, le=100)
    search: Optional[str] = None
    collection: Optional[str] = None
    sort_key: Optional[ProductSortKey] = Field(None, alias="sortKey")
    reverse: bool = False

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, value: Any) -> Any:
        if value is None or value == "":
            return 20
        return value

    @field_validator("cursor", "search", "collection", "sort_key", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("reverse", mode="before")
    @classmethod
    def _parse_reverse(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value == "true"
        return value

    def to_variables(self) -> Dict[str, Any]:
        """GraphQL variables for the catalog listing query."""
        return {
            "first": self.limit,
            "after": self.cursor,
            "query": self.search,
            "sortKey": self.sort_key,
            "reverse": self.reverse,
        }


class ProductHandleParams(_Schema):
    handle: str = Field(min_length=1)


class CartIdParams(_Schema):
    cart_id: str = Field(min_length=1, alias="cartId")


class CartLineInput(_Schema):
    merchandise_id: str = Field(min_length=1, alias="merchandiseId")
    quantity: int = Field(ge=1, strict=True)

    def to_variables(self) -> Dict[str, Any]:
        return {"merchandiseId": self.merchandise_id, "quantity": self.quantity}


class CartCreateBody(_Schema):
    lines: Optional[List[CartLineInput]] = None


class CartLinesAddBody(_Schema):
    lines: List[CartLineInput] = Field(min_length=1)


class CartLineUpdateInput(_Schema):
    line_id: str = Field(min_length=1, alias="lineId")
    quantity: int = Field(ge=0, strict=True)

    def to_variables(self) -> Dict[str, Any]:
        return {"id": self.line_id, "quantity": self.quantity}


class CartLinesUpdateBody(_Schema):
    lines: List[CartLineUpdateInput] = Field(min_length=1)


class CartLinesRemoveBody(_Schema):
    line_ids: List[str] = Field(min_length=1, alias="lineIds")

    @field_validator("line_ids")
    @classmethod
    def _non_empty_ids(cls, value: List[str]) -> List[str]:
        if any(not line_id for line_id in value):
            raise ValueError("Line IDs must be non-empty strings")
        return value


def _issues(exc: PydanticValidationError) -> List[Dict[str, str]]:
    return [
        {
            "path": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def _validate(shape: Type[M], data: Any) -> M:
    try:
        return shape.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_issues(exc)) from exc


def validate_query(params: Mapping[str, Any], shape: Type[M]) -> M:
    """Validate URL query parameters (string values, coerced by the shape)."""
    return _validate(shape, dict(params))


def validate_route_param(params: Mapping[str, Any], shape: Type[M]) -> M:
    """Validate path parameters; list values are reduced to their first item."""
    flat = {
        key: (value[0] if value else "") if isinstance(value, (list, tuple)) else value
        for key, value in params.items()
    }
    return _validate(shape, flat)


def validate_body(raw: Union[bytes, str, Mapping[str, Any], None], shape: Type[M]) -> M:
    """
    Validate a JSON request body.

    Args:
        raw: Raw body bytes/text, or an already decoded mapping
        shape: Schema describing the expected body

    Returns:
        The validated, normalized body
    """
    if raw is None or (isinstance(raw, (bytes, str)) and not raw.strip()):
        raise ValidationError([{"path": "", "message": "Request body is required"}])

    if isinstance(raw, (bytes, str)):
        try:
            return shape.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise ValidationError(_issues(exc)) from exc

    return _validate(shape, raw)
