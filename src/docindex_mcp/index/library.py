"""The loaded, read-only search index for one library."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from docindex_mcp.index.catalog import ItemCatalog
from docindex_mcp.index.models import DisplayableMatch, Item, ParentEntry, Signature
from docindex_mcp.index.paths import PATH_SEPARATOR, PathResolver
from docindex_mcp.index.strings import StringRef, StringTable


class SearchIndex:
    """Immutable index of one library's documentation items.

    A SearchIndex is the explicit handle returned by ``load_index`` (or
    ``IndexBuilder.build``) and passed to every search call. It is never
    modified after construction; re-indexing produces a new value.

    Attributes:
        name: Library key (e.g. "graphtest")
        doc: Library-level doc summary reference
        catalog: Items in canonical order, paths already expanded
        parents: Owner arena addressed by ``Item.owner``
        strings: Frozen string table all references resolve against
    """

    def __init__(
        self,
        name: str,
        doc: StringRef,
        items: Iterable[Item],
        parents: Iterable[ParentEntry],
        strings: StringTable,
    ) -> None:
        self._name = name
        self._doc = doc
        self._strings = strings.freeze()
        self._parents: tuple[ParentEntry, ...] = tuple(parents)
        self._catalog = ItemCatalog.expand(items, self._strings)
        self._resolver = PathResolver(self._catalog, self._parents, self._strings)

    @property
    def name(self) -> str:
        return self._name

    @property
    def doc(self) -> str:
        return self._strings.resolve_ref(self._doc)

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    @property
    def parents(self) -> tuple[ParentEntry, ...]:
        return self._parents

    @property
    def strings(self) -> StringTable:
        return self._strings

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    def text(self, ref: StringRef) -> str:
        return self._strings.resolve_ref(ref)

    def resolve_path(self, item_index: int) -> str:
        return self._resolver.resolve(item_index)

    def owner_of(self, item_index: int) -> ParentEntry | None:
        owner = self._catalog[item_index].owner
        return None if owner is None else self._parents[owner]

    def render_signature(self, signature: Signature | None) -> str | None:
        """Render a signature as ``(a, b) -> ret``."""
        if signature is None:
            return None
        params = ", ".join(self.text(ref) for ref in signature.params)
        rendered = f"({params})"
        if signature.returns is not None:
            rendered += f" -> {self.text(signature.returns)}"
        return rendered

    def to_match(self, item_index: int) -> DisplayableMatch:
        item = self._catalog[item_index]
        return DisplayableMatch(
            resolved_path=self._resolver.resolve(item_index),
            kind=item.kind,
            summary=self.text(item.summary),
            library=self._name,
            display_name=self._resolver.display_name(item_index),
            signature=self.render_signature(item.signature),
        )

    def find_path(self, path: str) -> list[int]:
        """Positions of items whose resolved path equals ``path`` exactly.

        Several positions can match: overloaded or shadowed names are legal.
        """
        return [i for i in range(len(self._catalog)) if self._resolver.resolve(i) == path]

    def children_of(self, path: str) -> list[int]:
        """Positions of items exactly one path segment below ``path``."""
        prefix = f"{path}{PATH_SEPARATOR}" if path else ""
        children = []
        for i in range(len(self._catalog)):
            resolved = self._resolver.resolve(i)
            if resolved.startswith(prefix) and PATH_SEPARATOR not in resolved[len(prefix):]:
                children.append(i)
        return children

    def __len__(self) -> int:
        return len(self._catalog)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._catalog)

    def __repr__(self) -> str:
        return f"SearchIndex(name={self._name!r}, items={len(self._catalog)}, parents={len(self._parents)})"
