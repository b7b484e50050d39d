"""Documentation search index: format, decoding and path resolution.

Usage:
    from docindex_mcp.index import load_index, serialize_index

    index = load_index(json.loads(text))
    index.resolve_path(0)          # "graphtest::Node"
    serialize_index(index)         # dense native form again

Core Components:
    - StringTable: interned text behind integer handles
    - ItemCatalog: ordered items with decode-time path expansion
    - PathResolver: cached "module::Owner::name" paths
    - IndexBuilder: raw metadata -> SearchIndex
    - load_index / serialize_index: native JSON codec
    - parse_search_index_js: legacy rustdoc search-index.js reader
"""

from docindex_mcp.index.builder import IndexBuilder
from docindex_mcp.index.catalog import ItemCatalog
from docindex_mcp.index.codec import (
    dump_index_file,
    load_index,
    load_index_file,
    load_indexes,
    serialize_index,
)
from docindex_mcp.index.kinds import DEFAULT_POLICY, ItemKind, RankingPolicy
from docindex_mcp.index.legacy import parse_search_index_js
from docindex_mcp.index.library import SearchIndex
from docindex_mcp.index.models import DisplayableMatch, Item, ParentEntry, Signature
from docindex_mcp.index.paths import PathResolver
from docindex_mcp.index.strings import StringRef, StringTable

__all__ = [
    # Core components
    "IndexBuilder",
    "ItemCatalog",
    "PathResolver",
    "SearchIndex",
    "StringTable",
    # Codec
    "load_index",
    "load_indexes",
    "load_index_file",
    "serialize_index",
    "dump_index_file",
    "parse_search_index_js",
    # Data models
    "DisplayableMatch",
    "Item",
    "ItemKind",
    "ParentEntry",
    "Signature",
    "StringRef",
    # Ranking policy
    "RankingPolicy",
    "DEFAULT_POLICY",
]
