"""Query engine for loaded documentation indexes."""

from docindex_mcp.search.engine import ParsedQuery, QueryEngine, parse_query, search, search_many
from docindex_mcp.search.matching import MatchClass, classify, classify_item, classify_signature

__all__ = [
    "QueryEngine",
    "ParsedQuery",
    "parse_query",
    "search",
    "search_many",
    "MatchClass",
    "classify",
    "classify_item",
    "classify_signature",
]
