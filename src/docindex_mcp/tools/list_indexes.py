"""Index Listing Tool - Show which libraries are loaded."""

from typing import Any

from fastmcp import FastMCP

from docindex_mcp.contracts import build_docs_data, build_ok
from docindex_mcp.store import IndexStore


def list_payload(store: IndexStore) -> dict[str, Any]:
    entries = [
        {
            "library": index.name,
            "doc": index.doc,
            "items": len(index),
            "parents": len(index.parents),
        }
        for index in store.all()
    ]
    return build_ok(
        build_docs_data(
            action="list",
            entries=entries,
            summary={"count": len(entries)},
        )
    )


def register(mcp: FastMCP, store: IndexStore) -> None:
    """Register docindex_list_indexes tool with the MCP server."""

    @mcp.tool()
    def docindex_list_indexes() -> dict[str, Any]:
        """List loaded documentation indexes with their item counts.

        Related tools:
        - docindex_search: Find items by name or path
        - docindex_browse: Walk an index by fully qualified path
        """
        return list_payload(store)
