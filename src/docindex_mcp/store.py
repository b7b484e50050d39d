"""Named collection of loaded indexes.

The store is an explicit object owned by whoever serves queries (the MCP
server creates one); nothing registers indexes in module-level globals.
Indexes are replaced whole: loading a library again swaps in a new
SearchIndex value and never patches the old one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from docindex_mcp.config import DocIndexConfig
from docindex_mcp.errors import IndexLoadError, NotReady
from docindex_mcp.index.codec import load_index_file
from docindex_mcp.index.kinds import RankingPolicy
from docindex_mcp.index.library import SearchIndex
from docindex_mcp.index.models import DisplayableMatch
from docindex_mcp.search.engine import QueryEngine

logger = logging.getLogger("docindex-mcp.store")


class IndexStore:
    """Loaded indexes keyed by library name, searched with one ranking policy.

    Writers build a new mapping and swap it in under a lock; readers take
    the current mapping without locking and never see a partial update.

    Usage:
        >>> store = IndexStore()
        >>> store.load_file("graphtest.json")
        ['graphtest']
        >>> store.search("enumerate", 5)[0].resolved_path
        'graphtest::ops::SuperIndex::enumerate'
    """

    def __init__(self, indexes: Iterable[SearchIndex] = (), policy: RankingPolicy | None = None) -> None:
        self._indexes: dict[str, SearchIndex] = {index.name: index for index in indexes}
        self._engine = QueryEngine(policy)
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: DocIndexConfig) -> "IndexStore":
        """Create a store and load every file listed in ``DOCINDEX_PATHS``.

        With ``strict`` disabled, unreadable files are logged and skipped.
        """
        store = cls(policy=config.ranking_policy())
        for path in config.index_paths:
            try:
                store.load_file(path)
            except (OSError, IndexLoadError) as exc:
                if config.strict:
                    raise
                logger.warning("Skipping index file %s: %s", path, exc)
        return store

    def add(self, index: SearchIndex) -> None:
        with self._write_lock:
            updated = dict(self._indexes)
            updated[index.name] = index
            self._indexes = updated
        logger.info("Registered index '%s' (%d items)", index.name, len(index))

    def load_file(self, path: str | Path) -> list[str]:
        """Load all libraries in ``path``; returns their names."""
        loaded = load_index_file(path)
        with self._write_lock:
            updated = dict(self._indexes)
            updated.update(loaded)
            self._indexes = updated
        logger.info("Loaded %d index(es) from %s", len(loaded), path)
        return list(loaded)

    def get(self, name: str) -> SearchIndex:
        """Return the index for ``name``.

        Raises:
            NotReady: no index with that name has been loaded
        """
        index = self._indexes.get(name)
        if index is None:
            raise NotReady(f"index '{name}' is not loaded", library=name, available=self.names())
        return index

    def names(self) -> list[str]:
        return list(self._indexes)

    def all(self) -> list[SearchIndex]:
        return list(self._indexes.values())

    @property
    def engine(self) -> QueryEngine:
        return self._engine

    def search(self, query_text: str, max_results: int, library: str | None = None) -> tuple[DisplayableMatch, ...]:
        """Search one library, or all loaded libraries in load order.

        Raises:
            NotReady: nothing is loaded, or ``library`` is unknown
        """
        if library is not None:
            return self._engine.search(self.get(library), query_text, max_results)
        indexes = self.all()
        if not indexes:
            raise NotReady("no index has been loaded")
        return self._engine.search_many(indexes, query_text, max_results)

    def __contains__(self, name: object) -> bool:
        return name in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)
