"""Authentication mechanisms for the upstream catalog API."""

from search_proxy.infrastructure.auth.signature import RequestSigner, SignatureResponse

__all__ = ["RequestSigner", "SignatureResponse"]
