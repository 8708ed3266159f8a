"""Pytest fixtures for signer, adaptor and API tests."""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from search_proxy.adapters.implementations.walmart import WalmartCatalogAdapter
from search_proxy.core.config import Settings
from search_proxy.infrastructure.auth.signature import RequestSigner
from search_proxy.main import create_application

UPSTREAM_URL = "https://upstream.test/api-proxy/service/affil/product/v2/search"
CONSUMER_ID = "0f3c5b7e-consumer"


def write_pem(path, key) -> str:
    path.write_bytes(
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return str(path)


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def key_path(tmp_path, rsa_private_key) -> str:
    return write_pem(tmp_path / "private_key.pem", rsa_private_key)


@pytest.fixture
def settings(key_path) -> Settings:
    return Settings(
        _env_file=None,
        WALMART_SEARCH_API_URL=UPSTREAM_URL,
        WALMART_CONSUMER_ID=CONSUMER_ID,
        PRIVATE_KEY_PATH=key_path,
        ENABLE_STRUCTURED_LOGGING=False,
    )


class FakeClock:
    """Epoch-seconds clock that advances a fixed step on every read."""

    def __init__(self, start: float = 1_700_000_000.0, step: float = 0.5):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def signer(settings, clock) -> RequestSigner:
    return RequestSigner(
        consumer_id=settings.WALMART_CONSUMER_ID,
        private_key_path=settings.PRIVATE_KEY_PATH,
        key_version=settings.KEY_VERSION,
        clock=clock,
    )


def make_product(name: Optional[str], price: Any, item_id: int = 1, **fields: Any) -> Dict[str, Any]:
    product: Dict[str, Any] = {"itemId": item_id, **fields}
    if name is not None:
        product["name"] = name
    if price is not None:
        product["salePrice"] = price
    return product


def make_payload(items: List[Dict[str, Any]], query: str = "laptop", **fields: Any) -> Dict[str, Any]:
    payload = {
        "query": query,
        "sort": "relevance",
        "responseGroup": "base",
        "totalResults": len(items),
        "start": 1,
        "numItems": len(items),
        "items": items,
    }
    payload.update(fields)
    return payload


class UpstreamStub:
    """
    Stands in for the upstream catalog through ``httpx.MockTransport``.

    Records every request it receives so tests can assert on call counts,
    query strings and headers.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Any = make_payload([])
        self.raise_error: Optional[Exception] = None

    def respond(self, body: Any, status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_params(self) -> List[tuple]:
        return list(self.last_request.url.params.multi_items())


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def make_adapter(upstream) -> Callable[[RequestSigner], WalmartCatalogAdapter]:
    def _make(signer: RequestSigner) -> WalmartCatalogAdapter:
        return WalmartCatalogAdapter(
            base_url=UPSTREAM_URL,
            signer=signer,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)),
        )
    return _make


@pytest.fixture
def adapter(make_adapter, signer) -> WalmartCatalogAdapter:
    return make_adapter(signer)


@pytest.fixture
def client(settings, adapter) -> TestClient:
    app = create_application(settings=settings, catalog=adapter)
    with TestClient(app) as test_client:
        yield test_client
