from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from search_proxy import __version__
from search_proxy.adapters.implementations.walmart import WalmartCatalogAdapter
from search_proxy.adapters.interfaces.catalog import CatalogAdapterInterface
from search_proxy.api.error_handlers import register_exception_handlers
from search_proxy.core.config import Settings, get_settings, load_env_file
from search_proxy.core.logging import configure_logging, get_logger, set_correlation_id
from search_proxy.infrastructure.auth.signature import RequestSigner

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


def create_application(
    settings: Optional[Settings] = None,
    catalog: Optional[CatalogAdapterInterface] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted
        catalog: Catalog adaptor to use; a signed Walmart adaptor is built when omitted

    Returns:
        FastAPI: Configured FastAPI application instance

    Raises:
        ConfigurationError: If required upstream settings are missing
    """
    if settings is None:
        load_env_file()
        settings = get_settings()
    configure_logging(settings)

    signer = RequestSigner(
        consumer_id=settings.WALMART_CONSUMER_ID,
        private_key_path=settings.PRIVATE_KEY_PATH,
        key_version=settings.KEY_VERSION,
    )
    if catalog is None:
        catalog = WalmartCatalogAdapter(
            base_url=settings.WALMART_SEARCH_API_URL,
            signer=signer,
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting up Catalog Search Proxy", extra={"upstream": settings.WALMART_SEARCH_API_URL})
        yield
        logger.info("Shutting down Catalog Search Proxy")
        await catalog.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Signs product-search requests and forwards them to the upstream catalog API.",
        version=__version__,
        openapi_url=f"{settings.DOCS_URL}/openapi.json",
        docs_url=settings.DOCS_URL,
        redoc_url=f"{settings.DOCS_URL}/redoc",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.signer = signer
    app.state.catalog = catalog

    configure_middleware(app, settings)
    register_exception_handlers(app)
    register_routers(app)

    return app


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "process_time_ms": round(process_time * 1000, 2),
                },
                exc_info=True
            )
            raise

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            extra={
                "request_path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2)
            }
        )
        return response


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Import routers here to avoid circular imports
    from search_proxy.api.routes.health import health_router
    from search_proxy.api.routes.search import search_router

    app.include_router(health_router, prefix="/health", tags=["Health"])
    app.include_router(search_router, prefix="/search", tags=["Search"])


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    import uvicorn

    load_env_file()
    uvicorn.run(
        "search_proxy.main:create_application",
        factory=True,
        host="0.0.0.0",
        port=get_settings().PORT,
    )


if __name__ == "__main__":
    run()
