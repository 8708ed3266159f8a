from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from search_proxy.api.dependencies import (
    get_full_search_query,
    get_search_service,
    get_simple_search_query,
)
from search_proxy.core.exceptions import APIException, SigningError, UpstreamCallError
from search_proxy.core.logging import get_logger
from search_proxy.domain.schemas.search import (
    FullSearchQuery,
    SimpleSearchQuery,
    openapi_parameters,
)
from search_proxy.services.search_service import SearchService

search_router = APIRouter()
logger = get_logger(__name__)

ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"description": "Bad request - Missing or invalid parameters"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Internal server error - Failed to fetch products"},
}

FULL_QUERY_DOC = {"parameters": openapi_parameters(FullSearchQuery)}
SIMPLE_QUERY_DOC = {"parameters": openapi_parameters(SimpleSearchQuery)}


def fetch_failed(exc: APIException) -> APIException:
    """Re-raise a core failure with a caller-facing summary, keeping its error code."""
    message = f"Failed to fetch products: {exc.detail}"
    if isinstance(exc, UpstreamCallError):
        return UpstreamCallError(message, upstream_status=exc.upstream_status, original_exception=exc)
    if isinstance(exc, SigningError):
        return SigningError(message, original_exception=exc)
    return APIException(detail=message, code=exc.code)


@search_router.get(
    "",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
    summary="Search for products",
    description="Searches the upstream catalog for products matching the query string. "
                "Returns a list of product name and price based on relevance to query.",
    responses=ERROR_RESPONSES,
    openapi_extra=FULL_QUERY_DOC,
)
async def search_products(
    query: FullSearchQuery = Depends(get_full_search_query),
    search_service: SearchService = Depends(get_search_service),
) -> List[str]:
    logger.debug(f"Search request start={query.start} numItems={query.numItems}")
    try:
        return await search_service.get_products_name_and_price(query)
    except (SigningError, UpstreamCallError) as e:
        raise fetch_failed(e) from e


@search_router.get(
    "/full",
    response_model=List[Dict[str, Any]],
    status_code=status.HTTP_200_OK,
    summary="Get full product results",
    description="Searches the upstream catalog and returns the complete product records.",
    responses=ERROR_RESPONSES,
    openapi_extra=FULL_QUERY_DOC,
)
async def search_products_full(
    query: FullSearchQuery = Depends(get_full_search_query),
    search_service: SearchService = Depends(get_search_service),
) -> List[Dict[str, Any]]:
    try:
        products = await search_service.get_catalog_products(query)
    except (SigningError, UpstreamCallError) as e:
        raise fetch_failed(e) from e
    return [product.to_payload() for product in products]


@search_router.get(
    "/dev",
    response_model=Dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Get the raw upstream search response",
    description="Returns the full upstream payload, including pagination metadata. "
                "Intended for development and debugging.",
    responses=ERROR_RESPONSES,
    openapi_extra=FULL_QUERY_DOC,
)
async def search_products_dev(
    query: FullSearchQuery = Depends(get_full_search_query),
    search_service: SearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    try:
        response = await search_service.search_catalog(query)
    except (SigningError, UpstreamCallError) as e:
        raise fetch_failed(e) from e
    return response.to_payload()


@search_router.get(
    "/simple",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
    summary="Search by product name",
    description="Name-and-price search for a product keyword, 24 items from the first result by default.",
    responses=ERROR_RESPONSES,
    openapi_extra=SIMPLE_QUERY_DOC,
)
async def search_products_simple(
    query: SimpleSearchQuery = Depends(get_simple_search_query),
    search_service: SearchService = Depends(get_search_service),
) -> List[str]:
    try:
        return await search_service.simple_search(query)
    except (SigningError, UpstreamCallError) as e:
        raise fetch_failed(e) from e
