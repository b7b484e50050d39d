"""docindex MCP tool implementations."""

from . import browse_index, list_indexes, search_index

__all__ = [
    "browse_index",
    "list_indexes",
    "search_index",
]
