"""
Domain package for the Catalog Search Proxy.

Contains the inbound query schemas and the upstream catalog models. The
domain layer holds no transport or framework state.
"""
