"""Record types stored in a documentation search index.

Items and parent entries hold ``StringRef`` values; text is only produced
through the index's string table. Owners are referenced by position in the
parent table, never by object reference.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from docindex_mcp.index.kinds import ItemKind
from docindex_mcp.index.strings import StringRef


@dataclass(frozen=True)
class Signature:
    """Structured function signature: parameter types and return type."""

    params: Tuple[StringRef, ...] = ()
    returns: Optional[StringRef] = None


@dataclass(frozen=True)
class Item:
    """One documentation item as held by the catalog.

    Attributes:
        kind: Item kind, drives default ranking priority
        name: Item name (e.g. "enumerate")
        path: Module path (e.g. "graphtest::ops"). Empty only in serialized
            form, where it means "same path as the previous item".
        summary: One-line doc summary, may be empty
        owner: Position in the parent table for member items
        signature: Parameter/return types for functions and methods
    """

    kind: ItemKind
    name: StringRef
    path: StringRef
    summary: StringRef = ""
    owner: Optional[int] = None
    signature: Optional[Signature] = None


@dataclass(frozen=True)
class ParentEntry:
    """Owning type or interface of member items."""

    kind: ItemKind
    name: StringRef


@dataclass(frozen=True)
class DisplayableMatch:
    """Search hit as handed to renderers. Contains text only, no handles.

    Attributes:
        resolved_path: Fully qualified path ("graphtest::ops::SuperIndex::enumerate")
        kind: Item kind
        summary: Doc summary text
        library: Name of the index the item came from
        display_name: "Owner::name" for members, plain name otherwise
        signature: Rendered signature such as "(i, self) -> vec", if known
    """

    resolved_path: str
    kind: ItemKind
    summary: str
    library: str = ""
    display_name: str = ""
    signature: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert match to a JSON-friendly dictionary."""
        return {
            "path": self.resolved_path,
            "kind": self.kind.label,
            "summary": self.summary,
            "library": self.library,
            "display_name": self.display_name,
            "signature": self.signature,
        }
