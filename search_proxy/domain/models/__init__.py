from search_proxy.domain.models.product import Product, UpstreamResponse

__all__ = ["Product", "UpstreamResponse"]
