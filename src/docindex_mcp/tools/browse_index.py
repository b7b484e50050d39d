"""Index Browse Tool - Navigate documentation items by fully qualified path."""

from typing import Any, Dict, List, Optional

from fastmcp import FastMCP

from docindex_mcp.contracts import build_docs_data, build_error, build_error_from_exception, build_ok
from docindex_mcp.errors import NotReady
from docindex_mcp.index.library import SearchIndex
from docindex_mcp.index.paths import PATH_SEPARATOR
from docindex_mcp.store import IndexStore
from docindex_mcp.utils import ItemPath, normalize_item_path


def _entries(index: SearchIndex, positions: List[int]) -> List[Dict[str, Any]]:
    return [index.to_match(position).to_dict() for position in positions]


def _browse_root(store: IndexStore) -> Dict[str, Any]:
    entries = [
        {"library": index.name, "doc": index.doc, "items": len(index)}
        for index in store.all()
    ]
    return build_ok(
        build_docs_data(
            action="browse",
            entries=entries,
            summary={"path": "", "count": len(entries)},
        )
    )


def _candidate_indexes(store: IndexStore, path: str) -> List[SearchIndex]:
    library = path.split(PATH_SEPARATOR, 1)[0]
    if library in store:
        return [store.get(library)]
    return store.all()


def browse_payload(store: IndexStore, path: Optional[str]) -> Dict[str, Any]:
    """Look up an exact path: the item(s) at that path plus their direct children."""
    normalized = normalize_item_path(path)
    if not normalized:
        return _browse_root(store)
    if not len(store):
        return build_error_from_exception(NotReady("no index has been loaded"))

    items: List[Dict[str, Any]] = []
    children: List[Dict[str, Any]] = []
    library_hit = False
    for index in _candidate_indexes(store, normalized):
        library_hit = library_hit or normalized == index.name
        items.extend(_entries(index, index.find_path(normalized)))
        children.extend(_entries(index, index.children_of(normalized)))

    if not items and not children and not library_hit:
        parent = normalized.rsplit(PATH_SEPARATOR, 1)[0] if PATH_SEPARATOR in normalized else ""
        return build_error(
            code="path_not_found",
            message=f"No documentation item at '{normalized}'",
            details={"path": normalized, "fallback_path": parent, "libraries": store.names()},
        )

    return build_ok(
        build_docs_data(
            action="browse",
            entries=items,
            summary={
                "path": normalized,
                "count": len(items),
                "children": children,
                "child_count": len(children),
            },
        )
    )


def register(mcp: FastMCP, store: IndexStore) -> None:
    """Register docindex_browse tool with the MCP server."""

    @mcp.tool()
    def docindex_browse(path: ItemPath = None) -> Dict[str, Any]:
        """Browse documentation items by fully qualified path (like ls + cat).

        Returns the item(s) at exactly that path and the items one level
        below it (members of a type, contents of a module).
        """
        return browse_payload(store, path)
