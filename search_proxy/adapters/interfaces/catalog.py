from abc import ABC, abstractmethod
from enum import Enum

from search_proxy.domain.models.product import UpstreamResponse
from search_proxy.domain.schemas.search import FullSearchQuery


class APIStatus(str, Enum):
    """Enum defining possible API status values."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class CatalogAdapterInterface(ABC):
    """
    Abstract base interface for upstream product-catalog adaptors.

    An adaptor turns one validated search query into exactly one
    authenticated upstream call and hands back the decoded payload.
    """

    @abstractmethod
    async def search(self, query: FullSearchQuery) -> UpstreamResponse:
        """
        Run a search against the upstream catalog.

        Args:
            query: Validated search query.

        Returns:
            UpstreamResponse: The decoded upstream payload.

        Raises:
            SigningError: If the request could not be authenticated.
            UpstreamCallError: If the upstream call fails or returns a non-2xx status.
        """
        pass

    @abstractmethod
    def is_available(self) -> APIStatus:
        """
        Reports whether the adaptor is able to issue requests.

        Returns:
            APIStatus: The current status of the adaptor.
        """
        pass

    async def close(self) -> None:
        """Release transport resources held by the adaptor."""
        return None
