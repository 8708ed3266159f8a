"""HTTP layer: routers, request dependencies and exception handlers."""
