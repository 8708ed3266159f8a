from fastapi import Depends, Request

from search_proxy.adapters.interfaces.catalog import CatalogAdapterInterface
from search_proxy.core.logging import get_logger
from search_proxy.domain.schemas.search import (
    FullSearchQuery,
    SimpleSearchQuery,
    parse_query,
)
from search_proxy.infrastructure.auth.signature import RequestSigner
from search_proxy.services.search_service import SearchService

# Initialize logger
logger = get_logger(__name__)


def get_signer(request: Request) -> RequestSigner:
    """
    Dependency for providing the request signer built at startup.

    Returns:
        RequestSigner: The process-wide signer
    """
    return request.app.state.signer


def get_catalog_adapter(request: Request) -> CatalogAdapterInterface:
    """
    Dependency for providing the upstream catalog adaptor built at startup.

    Returns:
        CatalogAdapterInterface: The process-wide catalog adaptor
    """
    return request.app.state.catalog


def get_search_service(
    catalog: CatalogAdapterInterface = Depends(get_catalog_adapter),
) -> SearchService:
    return SearchService(catalog)


async def get_full_search_query(request: Request) -> FullSearchQuery:
    """
    Validate the request's query string as a full search query.

    Raises:
        ValidationException: If any parameter violates its constraints
    """
    query = parse_query(FullSearchQuery, request.query_params)
    logger.debug("Validated search query", extra={"params": query.to_query_params()})
    return query


async def get_simple_search_query(request: Request) -> SimpleSearchQuery:
    """
    Validate the request's query string as a simple product search.

    Raises:
        ValidationException: If any parameter violates its constraints
    """
    return parse_query(SimpleSearchQuery, request.query_params)
