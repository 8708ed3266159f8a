from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import Dict, List, Optional

from search_proxy import __version__
from search_proxy.adapters.interfaces.catalog import APIStatus, CatalogAdapterInterface
from search_proxy.api.dependencies import get_catalog_adapter, get_signer
from search_proxy.core.exceptions import SigningError
from search_proxy.core.logging import get_logger
from search_proxy.infrastructure.auth.signature import RequestSigner

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str = __version__
    service: str = "Catalog Search Proxy"


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str
    details: Optional[Dict] = None


class DetailedHealthStatus(HealthStatus):
    """Detailed health status with dependency information."""
    dependencies: List[DependencyStatus]


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic health status of the service."
)
async def get_health() -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        HealthStatus: Basic service health status
    """
    logger.debug("Health check requested")
    return HealthStatus(status="ok")


@health_router.get(
    "/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Returns health of the signing key and catalog adaptor. Makes no upstream call."
)
async def get_detailed_health(
    signer: RequestSigner = Depends(get_signer),
    catalog: CatalogAdapterInterface = Depends(get_catalog_adapter),
) -> DetailedHealthStatus:
    """
    Detailed health check endpoint with dependency status.

    The signer is exercised with a sign-then-verify round trip so a broken
    key shows up here before it fails a search.

    Returns:
        DetailedHealthStatus: Detailed service health with dependencies status
    """
    logger.debug("Detailed health check requested")

    try:
        signed = signer.generate_signature()
        verified = signer.verify(signed.signature, signed.timestamp)
        signer_status = DependencyStatus(
            name="request_signer",
            status="ok" if verified else "error",
            details={"key_version": signer.key_version},
        )
    except SigningError as e:
        signer_status = DependencyStatus(
            name="request_signer",
            status="error",
            details={"error": e.detail},
        )

    catalog_state = catalog.is_available()
    catalog_status = DependencyStatus(
        name="catalog_adaptor",
        status="ok" if catalog_state == APIStatus.AVAILABLE else "error",
        details={"state": catalog_state.value},
    )

    dependencies = [signer_status, catalog_status]
    overall = "ok" if all(dep.status == "ok" for dep in dependencies) else "degraded"
    return DetailedHealthStatus(status=overall, dependencies=dependencies)
