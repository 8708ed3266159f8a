"""
Interfaces package for the Catalog Search Proxy.

Abstract base interfaces used to standardize interactions with upstream catalogs.
"""

from .catalog import APIStatus, CatalogAdapterInterface

__all__ = [
    'APIStatus',
    'CatalogAdapterInterface',
]
