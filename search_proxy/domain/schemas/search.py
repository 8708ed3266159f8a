"""Inbound search query schemas.

Each model is the single declaration of a query's constraints: FastAPI reads
the fields for the OpenAPI document, :func:`parse_query` validates raw query
strings against them and reports violations per field.
"""
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from search_proxy.core.exceptions import ValidationException

MAX_NUM_ITEMS = 25
DEFAULT_SIMPLE_NUM_ITEMS = 24
DEFAULT_SIMPLE_START = 1

Q = TypeVar("Q", bound=BaseModel)


class FullSearchQuery(BaseModel):
    """Query parameters accepted by the full search endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: str = Field(..., min_length=1, description="Search query")
    sort: Optional[str] = Field(None, description="Sort by attribute (e.g., price, title)")
    order: Optional[Literal["asc", "desc"]] = Field(None, description="Sort order")
    numItems: Optional[int] = Field(
        None, ge=1, le=MAX_NUM_ITEMS, description="Number of items to return (1-25)"
    )
    start: Optional[int] = Field(None, ge=1, description="Starting item number for pagination")
    responseGroup: Optional[str] = Field(None, description="Response group (e.g., base, full)")
    facet: Optional[str] = Field(None, description="Enable faceting")
    facet_filter: Optional[str] = Field(None, alias="facet.filter", description="Facet filter")
    facet_range: Optional[str] = Field(None, alias="facet.range", description="Facet range")

    def to_query_params(self) -> Dict[str, Any]:
        """
        Outbound query-string parameters.

        Set fields only, in declaration order, under their wire names.
        """
        return self.model_dump(by_alias=True, exclude_none=True)


class SimpleSearchQuery(BaseModel):
    """Query parameters for the product-name search shortcut."""

    model_config = ConfigDict(extra="ignore")

    product: str = Field(..., min_length=1, description="Product to search for")
    numItems: int = Field(
        DEFAULT_SIMPLE_NUM_ITEMS, ge=1, le=MAX_NUM_ITEMS, description="Number of items to return"
    )
    start: int = Field(DEFAULT_SIMPLE_START, ge=1, description="Starting item number for pagination")

    def to_full_query(self) -> FullSearchQuery:
        return FullSearchQuery(query=self.product, numItems=self.numItems, start=self.start)


def openapi_parameters(model: Type[BaseModel]) -> List[Dict[str, Any]]:
    """OpenAPI ``in: query`` parameter objects derived from a query model."""
    schema = model.model_json_schema(by_alias=True)
    required = set(schema.get("required", []))
    parameters = []
    for name, prop in schema["properties"].items():
        prop = dict(prop)
        description = prop.pop("description", None)
        prop.pop("title", None)
        variants = [v for v in prop.pop("anyOf", []) if v.get("type") != "null"]
        if len(variants) == 1:
            prop.update(variants[0])
        if prop.get("default", ...) is None:
            del prop["default"]
        parameters.append({
            "name": name,
            "in": "query",
            "required": name in required,
            "description": description,
            "schema": prop,
        })
    return parameters


def format_issues(error: ValidationError) -> List[Dict[str, str]]:
    """Flatten a pydantic error into ``{"path", "message"}`` pairs."""
    issues = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"]) or "query"
        issues.append({"path": path, "message": err["msg"]})
    return issues


def parse_query(model: Type[Q], params: Mapping[str, Any]) -> Q:
    """
    Validate raw query parameters against a query model.

    Blank optional values are treated as absent; blank required values are
    kept so that the non-empty constraint reports them.

    Args:
        model: Query model to validate against
        params: Raw query parameters, e.g. ``request.query_params``

    Returns:
        The validated, coerced query

    Raises:
        ValidationException: With one issue per violated constraint
    """
    required = {
        field.alias or name for name, field in model.model_fields.items() if field.is_required()
    }
    data = {
        key: value for key, value in params.items() if value != "" or key in required
    }
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationException(issues=format_issues(e)) from e
