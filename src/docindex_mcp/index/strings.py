"""Shared string table for the serialized index.

Repeated text (names, module paths, common type names) is stored once and
referenced by a small integer handle. A ``StringRef`` is either such a
handle or an inline literal that was not worth interning.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Union

StringRef = Union[str, int]


class StringTable:
    """Deduplicating text table addressed by integer handles.

    Usage:
        >>> table = StringTable()
        >>> table.intern("vec")
        0
        >>> table.intern("vec")
        0
        >>> table.resolve(0)
        'vec'
    """

    def __init__(self, strings: Iterable[str] = ()) -> None:
        self._strings: list[str] = []
        self._handles: dict[str, int] = {}
        self._frozen = False
        for text in strings:
            self._append(text)

    def _append(self, text: str) -> int:
        handle = len(self._strings)
        self._strings.append(text)
        self._handles.setdefault(text, handle)
        return handle

    def intern(self, text: str) -> int:
        """Return the handle for ``text``, adding it on first use."""
        if not isinstance(text, str):
            raise TypeError(f"only text can be interned, got {type(text).__name__}")
        handle = self._handles.get(text)
        if handle is not None:
            return handle
        if self._frozen:
            raise TypeError("string table is frozen")
        return self._append(text)

    def resolve(self, handle: int) -> str:
        """Return the text behind ``handle``.

        Raises:
            IndexError: handle is outside ``[0, len(table))``. Negative
                handles are rejected rather than counted from the end.
        """
        if isinstance(handle, bool) or not 0 <= handle < len(self._strings):
            raise IndexError(f"string handle {handle!r} out of range (table size {len(self._strings)})")
        return self._strings[handle]

    def resolve_ref(self, ref: StringRef) -> str:
        """Resolve a StringRef: inline literals pass through, handles are looked up."""
        if isinstance(ref, str):
            return ref
        return self.resolve(ref)

    def handle_of(self, text: str) -> int | None:
        """Handle already assigned to ``text``, or None."""
        return self._handles.get(text)

    def freeze(self) -> "StringTable":
        """Stop accepting new strings; returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def to_list(self) -> list[str]:
        return list(self._strings)

    def __len__(self) -> int:
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __contains__(self, text: object) -> bool:
        return text in self._handles

    def __repr__(self) -> str:
        return f"StringTable(size={len(self._strings)}, frozen={self._frozen})"
