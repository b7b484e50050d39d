"""Lazy, cached resolution of fully qualified item paths."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from docindex_mcp.index.catalog import ItemCatalog
from docindex_mcp.index.models import Item, ParentEntry
from docindex_mcp.index.strings import StringTable

PATH_SEPARATOR = "::"


class SearchKeys(NamedTuple):
    """Case-folded strings the query engine matches against."""

    name: str
    display_name: str
    path: str
    params: tuple[str, ...] = ()
    returns: str = ""


class PathResolver:
    """Expands items into ``module::Owner::name`` paths.

    Results are cached per item position. The index is immutable, so the
    caches are filled lazily and never invalidated. Each key is written at
    most once (``dict.setdefault``), which keeps concurrent readers safe.

    Usage:
        >>> resolver.resolve(6)
        'graphtest::ops::SuperIndex::enumerate'
        >>> resolver.display_name(6)
        'SuperIndex::enumerate'
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        parents: Sequence[ParentEntry],
        strings: StringTable,
    ) -> None:
        self._catalog = catalog
        self._parents = parents
        self._strings = strings
        self._paths: dict[int, str] = {}
        self._display_names: dict[int, str] = {}
        self._keys: dict[int, SearchKeys] = {}

    def owner_name(self, item: Item) -> str | None:
        if item.owner is None:
            return None
        return self._strings.resolve_ref(self._parents[item.owner].name)

    def resolve(self, item_index: int) -> str:
        """Fully qualified path of the item at ``item_index``."""
        cached = self._paths.get(item_index)
        if cached is not None:
            return cached

        item = self._catalog[item_index]
        module_path = self._strings.resolve_ref(item.path)
        parts = [module_path] if module_path else []
        parts.append(self.display_name(item_index))
        return self._paths.setdefault(item_index, PATH_SEPARATOR.join(parts))

    def display_name(self, item_index: int) -> str:
        """``Owner::name`` for member items, the bare name otherwise."""
        cached = self._display_names.get(item_index)
        if cached is not None:
            return cached

        item = self._catalog[item_index]
        name = self._strings.resolve_ref(item.name)
        owner = self.owner_name(item)
        display = f"{owner}{PATH_SEPARATOR}{name}" if owner else name
        return self._display_names.setdefault(item_index, display)

    def search_keys(self, item_index: int) -> SearchKeys:
        cached = self._keys.get(item_index)
        if cached is not None:
            return cached

        item = self._catalog[item_index]
        signature = item.signature
        keys = SearchKeys(
            name=self._strings.resolve_ref(item.name).casefold(),
            display_name=self.display_name(item_index).casefold(),
            path=self.resolve(item_index).casefold(),
            params=()
            if signature is None
            else tuple(self._strings.resolve_ref(p).casefold() for p in signature.params),
            returns=""
            if signature is None or signature.returns is None
            else self._strings.resolve_ref(signature.returns).casefold(),
        )
        return self._keys.setdefault(item_index, keys)

    def precompute(self) -> None:
        """Resolve every item up front, leaving the caches read-only in practice."""
        for item_index in range(len(self._catalog)):
            self.search_keys(item_index)

    @property
    def cached_count(self) -> int:
        return len(self._paths)
