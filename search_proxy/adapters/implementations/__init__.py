"""Concrete catalog adaptor implementations."""

from search_proxy.adapters.implementations.walmart import WalmartCatalogAdapter

__all__ = ["WalmartCatalogAdapter"]
