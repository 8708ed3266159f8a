from search_proxy.domain.schemas.search import FullSearchQuery, SimpleSearchQuery, parse_query

__all__ = ["FullSearchQuery", "SimpleSearchQuery", "parse_query"]
