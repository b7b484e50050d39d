"""Build step: raw item metadata -> string table, parent table and catalog.

This is the single-writer phase. A builder produces exactly one
``SearchIndex``; queries never observe a half-built index because the index
object only exists once ``build()`` returns.

Raw record format accepted by ``IndexBuilder.from_records``:

    {
        "kind": "fn",                 # ItemKind name, label or integer code
        "name": "enumerate",
        "path": "graphtest::ops",     # "" or missing: same as previous record
        "summary": "...",             # optional
        "owner": {"kind": "trait", "name": "SuperIndex"},   # optional
        "params": ["self"],           # optional
        "returns": "zip"              # optional
    }
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from docindex_mcp.errors import MalformedRecord, OutOfRangeReference
from docindex_mcp.index.kinds import ItemKind
from docindex_mcp.index.library import SearchIndex
from docindex_mcp.index.models import Item, ParentEntry, Signature
from docindex_mcp.index.strings import StringTable

logger = logging.getLogger("docindex-mcp.index")

OwnerSpec = Union[int, ParentEntry, Tuple[Union[ItemKind, str, int], str], Mapping[str, Any]]


def coerce_kind(value: Union[ItemKind, str, int]) -> ItemKind:
    """Accept an ItemKind, its integer code, enum name or display label."""
    if isinstance(value, ItemKind):
        return value
    if isinstance(value, str):
        return ItemKind.from_name(value)
    return ItemKind.from_code(value)


class IndexBuilder:
    """Accumulates items in insertion order and produces a SearchIndex.

    Every text is interned into one string table, so identical text always
    shares a handle. Parent entries are deduplicated by (kind, name).

    Usage:
        >>> builder = IndexBuilder("graphtest", doc="an example graph module")
        >>> builder.add_item("struct", "Node", path="graphtest")
        0
        >>> builder.add_item("method", "nodes", owner=("struct", "Node"))
        1
        >>> index = builder.build()
    """

    def __init__(self, name: str, doc: str = "") -> None:
        if not name:
            raise ValueError("index name must not be empty")
        self.name = name
        self._strings = StringTable()
        self._doc = self._strings.intern(doc)
        self._items: List[Item] = []
        self._parents: List[ParentEntry] = []
        self._parent_positions: Dict[Tuple[ItemKind, str], int] = {}
        self._last_path: Optional[str] = None
        self._built = False

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError(f"index '{self.name}' has already been built")

    def add_parent(self, kind: Union[ItemKind, str, int], name: str) -> int:
        """Register an owner type and return its parent-table position."""
        self._check_open()
        key = (coerce_kind(kind), name)
        position = self._parent_positions.get(key)
        if position is None:
            position = len(self._parents)
            self._parents.append(ParentEntry(kind=key[0], name=self._strings.intern(name)))
            self._parent_positions[key] = position
        return position

    def _owner_position(self, owner: OwnerSpec) -> int:
        if isinstance(owner, bool):
            raise MalformedRecord("owner must be a parent position or (kind, name)", field="owner", value=owner)
        if isinstance(owner, int):
            if not 0 <= owner < len(self._parents):
                raise OutOfRangeReference(
                    f"owner position {owner} out of range ({len(self._parents)} parents)",
                    record=len(self._items),
                    field="owner",
                    value=owner,
                    limit=len(self._parents),
                )
            return owner
        if isinstance(owner, ParentEntry):
            return self.add_parent(owner.kind, self._strings.resolve_ref(owner.name))
        if isinstance(owner, Mapping):
            return self.add_parent(owner["kind"], owner["name"])
        kind, name = owner
        return self.add_parent(kind, name)

    def add_item(
        self,
        kind: Union[ItemKind, str, int],
        name: str,
        path: str = "",
        summary: str = "",
        owner: Optional[OwnerSpec] = None,
        params: Optional[Sequence[str]] = None,
        returns: Optional[str] = None,
    ) -> int:
        """Append an item and return its catalog position.

        An empty ``path`` repeats the previous item's path.

        Raises:
            MalformedRecord: empty name, or empty path on the first item
        """
        self._check_open()
        position = len(self._items)
        if not name:
            raise MalformedRecord("item name must not be empty", record=position, field="name")
        module_path = path or self._last_path
        if not module_path:
            raise MalformedRecord("first item must carry a non-empty path", record=position, field="path")

        item_kind = coerce_kind(kind)
        signature = None
        if params is not None or returns is not None:
            signature = Signature(
                params=tuple(self._strings.intern(p) for p in (params or ())),
                returns=None if returns is None else self._strings.intern(returns),
            )

        self._items.append(
            Item(
                kind=item_kind,
                name=self._strings.intern(name),
                path=self._strings.intern(module_path),
                summary=self._strings.intern(summary or ""),
                owner=None if owner is None else self._owner_position(owner),
                signature=signature,
            )
        )
        self._last_path = module_path
        return position

    def add_record(self, record: Mapping[str, Any]) -> int:
        """Append one raw metadata record (see module docstring)."""
        position = len(self._items)
        if not isinstance(record, Mapping):
            raise MalformedRecord("raw item record must be an object", record=position, value=record)
        for required in ("kind", "name"):
            if required not in record:
                raise MalformedRecord(f"raw item record missing '{required}'", record=position, field=required)
        try:
            return self.add_item(
                record["kind"],
                record["name"],
                path=record.get("path") or "",
                summary=record.get("summary") or "",
                owner=record.get("owner"),
                params=record.get("params"),
                returns=record.get("returns"),
            )
        except MalformedRecord:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedRecord(f"invalid raw item record: {exc}", record=position) from exc

    @classmethod
    def from_records(cls, name: str, records: Iterable[Mapping[str, Any]], doc: str = "") -> SearchIndex:
        """Build an index from an ordered list of raw metadata records."""
        builder = cls(name, doc=doc)
        for record in records:
            builder.add_record(record)
        return builder.build()

    def build(self) -> SearchIndex:
        """Produce the immutable index. The builder cannot be reused afterwards."""
        self._check_open()
        self._built = True
        index = SearchIndex(
            name=self.name,
            doc=self._doc,
            items=self._items,
            parents=self._parents,
            strings=self._strings,
        )
        logger.info(
            "Built index '%s': %d items, %d parents, %d strings",
            self.name,
            len(self._items),
            len(self._parents),
            len(self._strings),
        )
        return index
