"""Item kinds and the kind-priority ranking policy.

The integer values of ``ItemKind`` are part of the serialized format and must
stay stable across index versions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Mapping


class ItemKind(IntEnum):
    """Kind of a documentation item.

    Codes follow the historical rustdoc numbering so indexes produced from
    rustdoc output keep their kind column unchanged.
    """

    MODULE = 0
    RECORD_TYPE = 3
    FUNCTION = 5
    TYPE_ALIAS = 6
    INTERFACE_TYPE = 8
    METHOD = 11
    ASSOCIATED_TYPE_SLOT = 16
    CONSTANT = 17

    @property
    def label(self) -> str:
        """Short display label (``fn``, ``struct``, ...)."""
        return KIND_LABELS[self]

    @classmethod
    def from_code(cls, code: int) -> "ItemKind":
        """Map a serialized kind code, raising ``ValueError`` for unknown codes."""
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError(f"kind code must be an integer, got {code!r}")
        return cls(code)

    @classmethod
    def from_name(cls, name: str) -> "ItemKind":
        """Parse a kind from its enum name or display label (case-insensitive)."""
        key = name.strip().lower().replace("-", "_")
        for kind in cls:
            if key in (kind.name.lower(), kind.label):
                return kind
        raise ValueError(f"Unknown item kind: {name!r}")


KIND_LABELS: dict[ItemKind, str] = {
    ItemKind.MODULE: "mod",
    ItemKind.RECORD_TYPE: "struct",
    ItemKind.FUNCTION: "fn",
    ItemKind.TYPE_ALIAS: "type",
    ItemKind.INTERFACE_TYPE: "trait",
    ItemKind.METHOD: "method",
    ItemKind.ASSOCIATED_TYPE_SLOT: "assoctype",
    ItemKind.CONSTANT: "const",
}

# Query prefixes accepted by the engine, e.g. "fn:enumerate".
KIND_FILTER_ALIASES: dict[str, ItemKind] = {
    "mod": ItemKind.MODULE,
    "module": ItemKind.MODULE,
    "struct": ItemKind.RECORD_TYPE,
    "enum": ItemKind.RECORD_TYPE,
    "union": ItemKind.RECORD_TYPE,
    "fn": ItemKind.FUNCTION,
    "function": ItemKind.FUNCTION,
    "type": ItemKind.TYPE_ALIAS,
    "typedef": ItemKind.TYPE_ALIAS,
    "trait": ItemKind.INTERFACE_TYPE,
    "method": ItemKind.METHOD,
    "tymethod": ItemKind.METHOD,
    "assoctype": ItemKind.ASSOCIATED_TYPE_SLOT,
    "associatedtype": ItemKind.ASSOCIATED_TYPE_SLOT,
    "const": ItemKind.CONSTANT,
    "constant": ItemKind.CONSTANT,
}

DEFAULT_KIND_PRIORITY: dict[ItemKind, int] = {
    ItemKind.FUNCTION: 0,
    ItemKind.RECORD_TYPE: 0,
    ItemKind.INTERFACE_TYPE: 0,
    ItemKind.TYPE_ALIAS: 0,
    ItemKind.METHOD: 1,
    ItemKind.ASSOCIATED_TYPE_SLOT: 1,
    ItemKind.CONSTANT: 2,
    ItemKind.MODULE: 3,
}


@dataclass(frozen=True)
class RankingPolicy:
    """Kind tie-break priority used when match classes are equal.

    Lower values rank first. Kinds missing from ``priorities`` rank after
    every listed kind.
    """

    priorities: Mapping[ItemKind, int] = field(default_factory=lambda: dict(DEFAULT_KIND_PRIORITY))

    def priority(self, kind: ItemKind) -> int:
        return self.priorities.get(kind, len(self.priorities))

    @classmethod
    def from_order(cls, order: Iterable[ItemKind | str]) -> "RankingPolicy":
        """Build a policy from kinds listed highest priority first.

        Kinds not named keep their default relative order, after the listed ones.

        Example:
            >>> policy = RankingPolicy.from_order(["method", "fn"])
            >>> policy.priority(ItemKind.METHOD) < policy.priority(ItemKind.FUNCTION)
            True
        """
        kinds = [k if isinstance(k, ItemKind) else ItemKind.from_name(k) for k in order]
        ordered = list(dict.fromkeys(kinds))
        priorities = {kind: rank for rank, kind in enumerate(ordered)}
        rest = sorted(
            (k for k in ItemKind if k not in priorities),
            key=lambda k: (DEFAULT_KIND_PRIORITY[k], k.value),
        )
        for offset, kind in enumerate(rest):
            priorities[kind] = len(ordered) + offset
        return cls(priorities=priorities)


DEFAULT_POLICY = RankingPolicy()
