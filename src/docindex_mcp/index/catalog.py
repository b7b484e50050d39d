"""Ordered item catalog with decode-time path expansion."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import replace
from typing import overload

from docindex_mcp.errors import MalformedRecord
from docindex_mcp.index.models import Item
from docindex_mcp.index.strings import StringTable

logger = logging.getLogger("docindex-mcp.index")


class ItemCatalog(Sequence):
    """Immutable, insertion-ordered sequence of items.

    Catalog order is the canonical display order and the last ranking
    tie-break, so it is never re-sorted. Iteration is restartable: each
    ``iter()`` replays the same items in the same order.
    """

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: tuple[Item, ...] = tuple(items)

    @classmethod
    def expand(cls, items: Iterable[Item], strings: StringTable) -> "ItemCatalog":
        """Build a catalog from serialized items, filling in compressed paths.

        An item whose path resolves to the empty string takes the path of the
        nearest preceding item with a non-empty path.

        Raises:
            MalformedRecord: the first item carries an empty path, so the
                compression run has nothing to inherit from.
        """
        expanded: list[Item] = []
        last_path = None
        inherited = 0
        for position, item in enumerate(items):
            if strings.resolve_ref(item.path):
                last_path = item.path
            elif last_path is None:
                raise MalformedRecord(
                    "first item must carry a non-empty path",
                    record=position,
                    field="path",
                )
            else:
                item = replace(item, path=last_path)
                inherited += 1
            expanded.append(item)
        logger.debug("Expanded %d compressed paths over %d items", inherited, len(expanded))
        return cls(expanded)

    @overload
    def __getitem__(self, position: int) -> Item: ...

    @overload
    def __getitem__(self, position: slice) -> tuple[Item, ...]: ...

    def __getitem__(self, position):
        if isinstance(position, slice):
            return self._items[position]
        if isinstance(position, bool) or not 0 <= position < len(self._items):
            raise IndexError(f"item index {position!r} out of range (catalog size {len(self._items)})")
        return self._items[position]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"ItemCatalog({len(self._items)} items)"
