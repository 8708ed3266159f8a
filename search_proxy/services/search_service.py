from typing import List

from search_proxy.adapters.interfaces.catalog import CatalogAdapterInterface
from search_proxy.core.logging import get_logger
from search_proxy.domain.models.product import Product, UpstreamResponse
from search_proxy.domain.schemas.search import FullSearchQuery, SimpleSearchQuery

logger = get_logger(__name__)


class SearchService:
    """Forwards validated search queries to the catalog and shapes the result."""

    def __init__(self, catalog: CatalogAdapterInterface):
        """Initialize with the upstream catalog adaptor."""
        self.catalog = catalog

    async def search_catalog(self, query: FullSearchQuery) -> UpstreamResponse:
        """Full upstream payload, pagination metadata included."""
        logger.info(f"Searching catalog for '{query.query}'")
        response = await self.catalog.search(query)
        logger.info(f"Total results: {response.totalResults}")
        return response

    async def get_products_name_and_price(self, query: FullSearchQuery) -> List[str]:
        """
        Gets a ``"{name} - {salePrice}"`` line per product.

        Upstream ordering is preserved; nothing is filtered or deduplicated.
        """
        response = await self.search_catalog(query)
        return [product.name_and_price() for product in response.items]

    async def get_catalog_products(self, query: FullSearchQuery) -> List[Product]:
        """Gets full product records in upstream order."""
        response = await self.search_catalog(query)
        return response.items

    async def simple_search(self, query: SimpleSearchQuery) -> List[str]:
        """Name-and-price search by product keyword with default paging."""
        logger.debug(
            f"Simple search for '{query.product}' (numItems={query.numItems}, start={query.start})"
        )
        return await self.get_products_name_and_price(query.to_full_query())
