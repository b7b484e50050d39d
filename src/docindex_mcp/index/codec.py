"""Serialized index format: decoding, validation and encoding.

Native JSON form, one object per library:

    {
      "name": "graphtest",
      "strings": ["graphtest", "vec", ...],
      "doc": StringRef,
      "items": [[kind, nameRef, pathRef, summaryRef, ownerOrNull, signatureOrNull], ...],
      "parents": [[kind, nameRef], ...]
    }

A StringRef is a JSON string (inline literal) or a JSON integer (handle into
``strings``). ``pathRef`` equal to "" repeats the previous item's path.
``signature`` is ``[[paramRef, ...], returnRefOrNull]``.

A file holds either one such object or a mapping ``{library: object}``.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from docindex_mcp.errors import MalformedRecord, OutOfRangeReference
from docindex_mcp.index.kinds import ItemKind
from docindex_mcp.index.legacy import parse_search_index_js
from docindex_mcp.index.library import SearchIndex
from docindex_mcp.index.models import Item, ParentEntry, Signature
from docindex_mcp.index.strings import StringRef, StringTable

logger = logging.getLogger("docindex-mcp.index")

ITEM_FIELDS = ("kind", "name", "path", "summary", "owner", "signature")


# =============================================================================
# Decoding
# =============================================================================


def _check_ref(value: Any, strings: StringTable, *, record: int | None, field: str) -> StringRef:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRecord(
            f"{field} must be a string or a string-table handle",
            record=record,
            field=field,
            value=value,
        )
    if not 0 <= value < len(strings):
        raise OutOfRangeReference(
            f"{field} handle {value} outside string table of size {len(strings)}",
            record=record,
            field=field,
            value=value,
            limit=len(strings),
        )
    return value


def _check_kind(value: Any, *, record: int, field: str = "kind") -> ItemKind:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRecord("kind must be an integer code", record=record, field=field, value=value)
    try:
        return ItemKind.from_code(value)
    except ValueError:
        raise OutOfRangeReference(
            f"unknown item kind code {value}",
            record=record,
            field=field,
            value=value,
        ) from None


def _check_row(row: Any, *, record: int, what: str, min_len: int, max_len: int) -> Sequence[Any]:
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise MalformedRecord(f"{what} record must be an array", record=record, value=row)
    if not min_len <= len(row) <= max_len:
        raise MalformedRecord(
            f"{what} record has {len(row)} fields, expected {min_len}-{max_len}",
            record=record,
            value=list(row),
        )
    return row


def _load_strings(raw: Any) -> StringTable:
    if not isinstance(raw, list):
        raise MalformedRecord("strings must be an array", field="strings")
    for position, text in enumerate(raw):
        if not isinstance(text, str):
            raise MalformedRecord("string table entries must be strings", record=position, field="strings", value=text)
    return StringTable(raw)


def _decode_parent(position: int, row: Any, strings: StringTable) -> ParentEntry:
    kind, name = _check_row(row, record=position, what="parent", min_len=2, max_len=2)
    return ParentEntry(
        kind=_check_kind(kind, record=position),
        name=_check_ref(name, strings, record=position, field="parent name"),
    )


def _decode_signature(raw: Any, strings: StringTable, *, record: int) -> Signature | None:
    if raw is None:
        return None
    params, returns = _check_row(raw, record=record, what="signature", min_len=2, max_len=2)
    if not isinstance(params, list):
        raise MalformedRecord("signature parameters must be an array", record=record, field="signature", value=params)
    return Signature(
        params=tuple(_check_ref(p, strings, record=record, field="signature param") for p in params),
        returns=None if returns is None else _check_ref(returns, strings, record=record, field="signature return"),
    )


def _decode_item(position: int, row: Any, strings: StringTable, parent_count: int) -> Item:
    fields = _check_row(row, record=position, what="item", min_len=5, max_len=len(ITEM_FIELDS))
    kind, name, path, summary, owner = fields[:5]
    signature = fields[5] if len(fields) > 5 else None

    if owner is not None:
        if isinstance(owner, bool) or not isinstance(owner, int):
            raise MalformedRecord("owner must be an integer or null", record=position, field="owner", value=owner)
        if not 0 <= owner < parent_count:
            raise OutOfRangeReference(
                f"owner {owner} outside parent table of size {parent_count}",
                record=position,
                field="owner",
                value=owner,
                limit=parent_count,
            )

    name_ref = _check_ref(name, strings, record=position, field="name")
    if not strings.resolve_ref(name_ref):
        raise MalformedRecord("item name must not be empty", record=position, field="name")

    return Item(
        kind=_check_kind(kind, record=position),
        name=name_ref,
        path=_check_ref(path, strings, record=position, field="path"),
        summary=_check_ref(summary, strings, record=position, field="summary"),
        owner=owner,
        signature=_decode_signature(signature, strings, record=position),
    )


def load_index(serialized: Mapping[str, Any], name: str | None = None) -> SearchIndex:
    """Validate a serialized index and return the loaded SearchIndex.

    Every record is validated before the index is constructed, so a failure
    never leaves a partially usable index behind.

    Args:
        serialized: Decoded JSON object in the native form
        name: Library key; overrides the object's own "name" field

    Raises:
        OutOfRangeReference: string, owner or kind reference out of bounds
        MalformedRecord: missing field or wrong shape

    Example:
        >>> index = load_index(json.loads(text))
        >>> index.resolve_path(0)
        'graphtest::Node'
    """
    if not isinstance(serialized, Mapping):
        raise MalformedRecord("serialized index must be an object", value=type(serialized).__name__)

    index_name = name or serialized.get("name")
    if not isinstance(index_name, str) or not index_name:
        raise MalformedRecord("serialized index has no library name", field="name")

    for required in ("items", "parents"):
        if required not in serialized:
            raise MalformedRecord(f"serialized index missing '{required}'", field=required)
    raw_items = serialized["items"]
    raw_parents = serialized["parents"]
    if not isinstance(raw_items, list):
        raise MalformedRecord("items must be an array", field="items")
    if not isinstance(raw_parents, list):
        raise MalformedRecord("parents must be an array", field="parents")

    strings = _load_strings(serialized.get("strings", []))
    doc = _check_ref(serialized.get("doc", ""), strings, record=None, field="doc")
    parents = [_decode_parent(pos, row, strings) for pos, row in enumerate(raw_parents)]
    items = [_decode_item(pos, row, strings, len(parents)) for pos, row in enumerate(raw_items)]

    index = SearchIndex(name=index_name, doc=doc, items=items, parents=parents, strings=strings)
    logger.info(
        "Loaded index '%s': %d items, %d parents, %d shared strings",
        index_name,
        len(items),
        len(parents),
        len(strings),
    )
    return index


def load_indexes(serialized: Mapping[str, Any]) -> dict[str, SearchIndex]:
    """Load a single-index object or a ``{library: index}`` mapping."""
    if not isinstance(serialized, Mapping):
        raise MalformedRecord("serialized index file must contain an object", value=type(serialized).__name__)
    if "items" in serialized:
        index = load_index(serialized)
        return {index.name: index}
    return {library: load_index(body, name=library) for library, body in serialized.items()}


def load_index_file(path: str | Path) -> dict[str, SearchIndex]:
    """Load every index stored in a file.

    ``.js`` files are read as legacy rustdoc ``search-index.js``; anything
    else is parsed as native JSON.

    Raises:
        FileNotFoundError: file does not exist
        IndexLoadError: content is invalid
    """
    index_path = Path(path)
    if not index_path.exists():
        raise FileNotFoundError(f"Index file not found: {index_path}")

    text = index_path.read_text(encoding="utf-8")
    if index_path.suffix == ".js":
        return parse_search_index_js(text)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedRecord(f"index file is not valid JSON: {exc}", field=str(index_path)) from exc
    if isinstance(data, Mapping) and "items" in data and "name" not in data:
        return {index_path.stem: load_index(data, name=index_path.stem)}
    return load_indexes(data)


# =============================================================================
# Encoding
# =============================================================================


def _compressed_texts(index: SearchIndex) -> list[dict[str, Any]]:
    """Per-item texts with repeated paths replaced by the empty sentinel."""
    rows = []
    previous_path = None
    for item in index.catalog:
        path = index.text(item.path)
        rows.append(
            {
                "kind": item.kind,
                "name": index.text(item.name),
                "path": "" if path == previous_path else path,
                "summary": index.text(item.summary),
                "owner": item.owner,
                "signature": None
                if item.signature is None
                else (
                    [index.text(p) for p in item.signature.params],
                    None if item.signature.returns is None else index.text(item.signature.returns),
                ),
            }
        )
        previous_path = path
    return rows


def serialize_index(index: SearchIndex) -> dict[str, Any]:
    """Encode an index into the dense native form.

    Texts used more than once go into the shared string table (in first-use
    order); single-use texts stay inline. Consecutive identical paths are
    stored as "".
    """
    rows = _compressed_texts(index)
    parent_names = [index.text(parent.name) for parent in index.parents]

    usage: Counter[str] = Counter()
    ordered: list[str] = [index.doc]
    for row in rows:
        ordered.extend([row["name"], row["path"], row["summary"]])
        if row["signature"] is not None:
            params, returns = row["signature"]
            ordered.extend(params)
            if returns is not None:
                ordered.append(returns)
    ordered.extend(parent_names)
    usage.update(text for text in ordered if text)

    table = StringTable(dict.fromkeys(text for text in ordered if text and usage[text] > 1))

    def ref(text: str) -> StringRef:
        handle = table.handle_of(text) if text else None
        return text if handle is None else handle

    items = []
    for row in rows:
        signature = None
        if row["signature"] is not None:
            params, returns = row["signature"]
            signature = [[ref(p) for p in params], None if returns is None else ref(returns)]
        items.append(
            [int(row["kind"]), ref(row["name"]), ref(row["path"]), ref(row["summary"]), row["owner"], signature]
        )

    return {
        "name": index.name,
        "strings": table.to_list(),
        "doc": ref(index.doc),
        "items": items,
        "parents": [[int(parent.kind), ref(name)] for parent, name in zip(index.parents, parent_names)],
    }


def dump_index_file(indexes: Mapping[str, SearchIndex], path: str | Path) -> Path:
    """Write indexes as a ``{library: index}`` JSON mapping."""
    output_path = Path(path)
    payload = {library: serialize_index(index) for library, index in indexes.items()}
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, separators=(",", ":"))
    logger.info("Wrote %d index(es) to %s", len(payload), output_path)
    return output_path
