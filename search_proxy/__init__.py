"""
Catalog Search Proxy - signed forwarding of product searches to an upstream catalog API.

Validates inbound search queries, signs each outbound request with the
configured RSA key and returns either a name/price summary or the full
upstream payload.
"""

__version__ = "0.1.0"
