import time
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from search_proxy.adapters.interfaces.catalog import APIStatus, CatalogAdapterInterface
from search_proxy.core.exceptions import ConfigurationError, SigningError, UpstreamCallError
from search_proxy.core.logging import get_logger
from search_proxy.domain.models.product import UpstreamResponse
from search_proxy.domain.schemas.search import FullSearchQuery
from search_proxy.infrastructure.auth.signature import RequestSigner

logger = get_logger(__name__)

# Upstream error bodies are logged up to this many characters
MAX_LOGGED_BODY = 2000


class WalmartCatalogAdapter(CatalogAdapterInterface):
    """
    Adaptor for the Walmart affiliate product search API.

    Each search is a single signed GET; there is no retry, so a failed
    attempt never gets replayed with its timestamp and signature.
    """

    def __init__(
        self,
        base_url: str,
        signer: RequestSigner,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the adaptor.

        Args:
            base_url: Upstream search endpoint
            signer: Produces the authentication headers for each request
            http_client: Optional shared HTTP client; one is created when omitted
            timeout: Upper bound in seconds for the outbound call
        """
        self.base_url = base_url
        self.signer = signer
        self.timeout = timeout
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def search(self, query: FullSearchQuery) -> UpstreamResponse:
        params = query.to_query_params()
        headers = self.signer.headers()

        logger.info(
            "Calling upstream catalog search",
            extra={"url": self.base_url, "params": params},
        )
        start_time = time.time()
        try:
            response = await self.http_client.get(
                self.base_url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                f"Upstream catalog returned HTTP {status_code}",
                extra={"status_code": status_code, "body": e.response.text[:MAX_LOGGED_BODY]},
            )
            raise UpstreamCallError(
                f"Upstream catalog returned HTTP {status_code}",
                upstream_status=status_code,
                original_exception=e,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error calling upstream catalog: {str(e)}")
            raise UpstreamCallError(
                f"Could not reach upstream catalog: {type(e).__name__}",
                original_exception=e,
            ) from e

        logger.debug(
            f"Upstream catalog responded in {time.time() - start_time:.2f}s",
            extra={"status_code": response.status_code},
        )
        return self._decode(response)

    def _decode(self, response: httpx.Response) -> UpstreamResponse:
        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as e:
            logger.error(
                "Upstream catalog returned a non-JSON body",
                extra={"body": response.text[:MAX_LOGGED_BODY]},
            )
            raise UpstreamCallError(
                "Upstream catalog returned an invalid response body",
                upstream_status=response.status_code,
                original_exception=e,
            ) from e

        try:
            return UpstreamResponse.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Unexpected upstream payload shape: {str(e)}")
            raise UpstreamCallError(
                "Upstream catalog returned an unexpected payload",
                upstream_status=response.status_code,
                original_exception=e,
            ) from e

    def is_available(self) -> APIStatus:
        """Available when the signing key can be loaded; makes no network call."""
        try:
            self.signer.private_key
        except (ConfigurationError, SigningError) as e:
            logger.warning(f"Catalog adaptor unavailable: {e.detail}")
            return APIStatus.UNAVAILABLE
        return APIStatus.AVAILABLE

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
