"""
Adapters package for the Catalog Search Proxy.

This package contains components for integrating with the upstream catalog API:
- Abstract interfaces that define the contract for catalog adaptors
- Concrete implementations for specific catalog APIs
"""

from . import interfaces

__all__ = [
    'interfaces',
]
