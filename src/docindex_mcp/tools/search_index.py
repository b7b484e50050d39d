"""Index Search Tool - Ranked name/path search over loaded documentation."""

import logging
from typing import Any, Optional

from fastmcp import FastMCP

from docindex_mcp.contracts import build_docs_data, build_error_from_exception, build_ok
from docindex_mcp.errors import NotReady
from docindex_mcp.store import IndexStore
from docindex_mcp.utils import DEFAULT_SEARCH_LIMIT, LibraryName, SearchLimit, SearchQuery

logger = logging.getLogger("docindex-mcp.tools")


def search_payload(
    store: IndexStore,
    query: str,
    limit: int,
    library: Optional[str] = None,
) -> dict[str, Any]:
    """Run a store search and wrap the matches in the tool envelope."""
    try:
        matches = store.search(query, limit, library=library)
    except NotReady as exc:
        code = "library_not_found" if library is not None and len(store) else exc.code
        logger.info("Search rejected (%s): %s", code, exc.message)
        return build_error_from_exception(exc, code=code)

    entries = []
    for rank, match in enumerate(matches, start=1):
        entry = match.to_dict()
        entry["rank"] = rank
        entries.append(entry)

    return build_ok(
        build_docs_data(
            action="search",
            entries=entries,
            summary={
                "count": len(entries),
                "query": query,
                "libraries": [library] if library is not None else store.names(),
            },
        )
    )


def register(mcp: FastMCP, store: IndexStore) -> None:
    """Register docindex_search tool with the MCP server."""

    @mcp.tool()
    def docindex_search(
        query: SearchQuery,
        limit: SearchLimit = DEFAULT_SEARCH_LIMIT,
        library: LibraryName = None,
    ) -> dict[str, Any]:
        """Search API documentation items by name or path (like a docs search box).

        Results are ranked exact name match first, then prefix, then substring;
        functions and types before methods, constants and modules.

        Query syntax:
        - "enumerate": item names containing the text
        - "SuperIndex::enumerate": owner-qualified or path-qualified names
        - "fn:children", "trait:graph": restrict to one item kind
        - "usize -> vec", "-> zip": match parameter and return types

        Related tools:
        - docindex_browse: Get details and members for a known path
        - docindex_list_indexes: See which libraries are loaded
        """
        return search_payload(store, query, limit, library)
