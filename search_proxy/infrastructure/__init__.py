"""Infrastructure layer for the Catalog Search Proxy."""
