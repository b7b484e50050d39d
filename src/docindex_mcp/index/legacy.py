"""Reader for the historical rustdoc ``search-index.js`` format.

The legacy file is a JavaScript program rather than data:

    var N=null,E="",T="t",U="u",searchIndex={};
    var R=["graphtest","result",...];
    searchIndex["graphtest"]={"doc":"...","i":[[3,"Node",R[0],"...",N,N],...],"p":[[8,R[9]],...]};

Short variables stand in for null/empty/common strings and ``R[k]`` points
into a shared-strings array. Those tricks stay inside this module: each
library is re-expressed through ``IndexBuilder`` as explicit records.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from docindex_mcp.errors import IndexLoadError, MalformedRecord, OutOfRangeReference
from docindex_mcp.index.builder import IndexBuilder
from docindex_mcp.index.kinds import ItemKind
from docindex_mcp.index.library import SearchIndex

logger = logging.getLogger("docindex-mcp.index")

# rustdoc ItemType codes -> ItemKind. Codes absent here (extern crates,
# imports, impls, fields, variants, macros, primitives, keywords, ...)
# have no documentation-search counterpart and are skipped.
RUSTDOC_KINDS: Dict[int, ItemKind] = {
    0: ItemKind.MODULE,
    3: ItemKind.RECORD_TYPE,  # struct
    4: ItemKind.RECORD_TYPE,  # enum
    5: ItemKind.FUNCTION,
    6: ItemKind.TYPE_ALIAS,  # typedef
    7: ItemKind.CONSTANT,  # static
    8: ItemKind.INTERFACE_TYPE,  # trait
    10: ItemKind.METHOD,  # tymethod
    11: ItemKind.METHOD,
    16: ItemKind.ASSOCIATED_TYPE_SLOT,
    17: ItemKind.CONSTANT,
    18: ItemKind.CONSTANT,  # associatedconstant
    19: ItemKind.RECORD_TYPE,  # union
    20: ItemKind.RECORD_TYPE,  # foreigntype
}

_DECLARATION = re.compile(r'\b([A-Za-z_$][\w$]*)\s*=\s*(null|"(?:[^"\\]|\\.)*"|-?\d+)\s*(?=[,;])')
_SHARED_STRINGS = re.compile(r"\bvar\s+R\s*=\s*(?=\[)")
_ASSIGNMENT = re.compile(r'searchIndex\[("(?:[^"\\]|\\.)*")\]\s*=\s*(?=\{)')
_IDENTIFIER_START = re.compile(r"[A-Za-z_$]")
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")


def _read_symbols(text: str) -> Dict[str, Any]:
    symbols: Dict[str, Any] = {}
    for statement in re.finditer(r"\bvar\s+([^;]*);", text):
        for match in _DECLARATION.finditer(statement.group(1) + ";"):
            symbols[match.group(1)] = json.loads(match.group(2))
    return symbols


def _read_shared_strings(text: str) -> List[str]:
    match = _SHARED_STRINGS.search(text)
    if match is None:
        return []
    try:
        shared, _ = json.JSONDecoder().raw_decode(text, match.end())
    except json.JSONDecodeError as exc:
        raise MalformedRecord(f"shared strings array is not valid JSON: {exc}", field="R") from exc
    if not isinstance(shared, list) or not all(isinstance(s, str) for s in shared):
        raise MalformedRecord("shared strings array must contain only strings", field="R")
    return shared


def _object_end(text: str, start: int) -> int:
    """Position just past the ``{...}`` literal starting at ``start``."""
    depth = 0
    in_string = False
    escaped = False
    for position in range(start, len(text)):
        char = text[position]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return position + 1
    raise MalformedRecord("unterminated object literal in search-index.js", value=start)


def _to_json(literal: str, symbols: Dict[str, Any], shared: Sequence[str]) -> str:
    """Replace bare identifiers and ``R[k]`` references with JSON values."""
    out: List[str] = []
    position = 0
    length = len(literal)
    while position < length:
        char = literal[position]
        if char == '"':
            end = position + 1
            while literal[end] != '"':
                end += 2 if literal[end] == "\\" else 1
            out.append(literal[position:end + 1])
            position = end + 1
            continue
        if not _IDENTIFIER_START.match(char):
            out.append(char)
            position += 1
            continue

        identifier = _IDENTIFIER.match(literal, position).group(0)
        position += len(identifier)
        if identifier == "R" and literal.startswith("[", position):
            close = literal.index("]", position)
            handle = int(literal[position + 1:close])
            if not 0 <= handle < len(shared):
                raise OutOfRangeReference(
                    f"shared string R[{handle}] out of range",
                    field="R",
                    value=handle,
                    limit=len(shared),
                )
            out.append(json.dumps(shared[handle]))
            position = close + 1
        elif identifier in symbols:
            out.append(json.dumps(symbols[identifier]))
        elif identifier in ("null", "true", "false"):
            out.append(identifier)
        else:
            raise MalformedRecord(f"unknown identifier '{identifier}' in search-index.js", value=identifier)
    return "".join(out)


def _render_type(entry: Any) -> str:
    """Render a rustdoc type entry ``[name, generics?]`` as ``name<g, ...>``."""
    if isinstance(entry, str):
        return entry
    if not isinstance(entry, list) or not entry or not isinstance(entry[0], str):
        raise MalformedRecord("type entry must start with a name", field="signature", value=entry)
    name = entry[0]
    generics = entry[1] if len(entry) > 1 else None
    if generics:
        return f"{name}<{', '.join(_render_type(g) for g in generics)}>"
    return name


def _render_output(output: Any) -> Optional[str]:
    if not output:
        return None
    if isinstance(output[0], str):
        return _render_type(output)
    rendered = [_render_type(entry) for entry in output]
    return rendered[0] if len(rendered) == 1 else f"({', '.join(rendered)})"


def _signature(raw: Any) -> tuple:
    if raw is None:
        return None, None
    if not isinstance(raw, list) or not raw:
        raise MalformedRecord("signature must be [inputs, output?]", field="signature", value=raw)
    inputs = raw[0] or []
    params = [_render_type(entry) for entry in inputs]
    returns = _render_output(raw[1]) if len(raw) > 1 else None
    return params, returns


def _check_code(code: Any, *, record: int, field: str) -> int:
    if isinstance(code, bool) or not isinstance(code, int):
        raise MalformedRecord(f"{field} must be an integer rustdoc kind code", record=record, field=field, value=code)
    return code


def _check_text(value: Any, *, record: Optional[int], field: str, allow_empty: bool = True) -> str:
    if value is None and allow_empty:
        return ""
    if not isinstance(value, str) or not (value or allow_empty):
        raise MalformedRecord(f"invalid {field}: expected a string", record=record, field=field, value=value)
    return value


def _read_parents(parents: List[Any]) -> List[tuple]:
    """Validate the ``p`` table into ``(ItemKind, name)`` owner specs."""
    owners = []
    for position, row in enumerate(parents):
        if not isinstance(row, list) or len(row) != 2:
            raise MalformedRecord("legacy parent row must be [kind, name]", record=position, field="p", value=row)
        code = _check_code(row[0], record=position, field="parent kind")
        parent_name = _check_text(row[1], record=position, field="parent name", allow_empty=False)
        owners.append((RUSTDOC_KINDS.get(code, ItemKind.RECORD_TYPE), parent_name))
    return owners


def convert_library(name: str, body: Dict[str, Any]) -> SearchIndex:
    """Convert one decoded ``searchIndex[name]`` object into a SearchIndex.

    Raises:
        MalformedRecord: a row or parent entry has the wrong shape or type
        OutOfRangeReference: an owner points outside the parent table
    """
    rows = body.get("i")
    parents = body.get("p", [])
    if not isinstance(rows, list) or not isinstance(parents, list):
        raise MalformedRecord(f"library '{name}' must have 'i' and 'p' arrays", field="i")
    owners = _read_parents(parents)

    builder = IndexBuilder(name, doc=_check_text(body.get("doc"), record=None, field="doc"))
    last_path = None
    skipped = 0
    for position, row in enumerate(rows):
        if not isinstance(row, list) or len(row) < 5:
            raise MalformedRecord("legacy item row must have at least 5 fields", record=position, value=row)
        code, item_name, path, summary, owner = row[:5]
        code = _check_code(code, record=position, field="kind")
        path = _check_text(path, record=position, field="path")
        if path:
            last_path = path
        elif last_path is None:
            raise MalformedRecord("first item must carry a non-empty path", record=position, field="path")

        kind = RUSTDOC_KINDS.get(code)
        if kind is None:
            logger.debug("Skipping %s row %d with unsupported rustdoc kind %s", name, position, code)
            skipped += 1
            continue

        item_name = _check_text(item_name, record=position, field="name", allow_empty=False)
        summary = _check_text(summary, record=position, field="summary")
        owner_entry = None
        if owner is not None:
            if isinstance(owner, bool) or not isinstance(owner, int):
                raise MalformedRecord("owner must be an integer or null", record=position, field="owner", value=owner)
            if not 0 <= owner < len(owners):
                raise OutOfRangeReference(
                    f"owner {owner} outside parent table of size {len(owners)}",
                    record=position,
                    field="owner",
                    value=owner,
                    limit=len(owners),
                )
            owner_entry = owners[owner]

        try:
            params, returns = _signature(row[5] if len(row) > 5 else None)
        except IndexLoadError:
            raise
        except (IndexError, TypeError, ValueError) as exc:
            raise MalformedRecord(f"invalid signature: {exc}", record=position, field="signature") from exc
        builder.add_item(
            kind,
            item_name,
            path=last_path,
            summary=summary,
            owner=owner_entry,
            params=params,
            returns=returns,
        )

    if skipped:
        logger.warning("Skipped %d rows of unsupported kinds in library '%s'", skipped, name)
    return builder.build()


def parse_search_index_js(text: str) -> Dict[str, SearchIndex]:
    """Parse a legacy rustdoc ``search-index.js`` into one index per library.

    Raises:
        MalformedRecord: the script does not follow the expected layout
        OutOfRangeReference: an ``R[k]`` or owner reference is out of bounds
    """
    symbols = _read_symbols(text)
    shared = _read_shared_strings(text)
    symbols.pop("R", None)

    libraries: Dict[str, SearchIndex] = {}
    for match in _ASSIGNMENT.finditer(text):
        name = json.loads(match.group(1))
        start = match.end()
        literal = text[start:_object_end(text, start)]
        try:
            body = json.loads(_to_json(literal, symbols, shared))
        except json.JSONDecodeError as exc:
            raise MalformedRecord(f"library '{name}' is not a valid object literal: {exc}", field=name) from exc
        libraries[name] = convert_library(name, body)

    if not libraries:
        raise MalformedRecord("no searchIndex assignments found in search-index.js")
    logger.info("Parsed %d legacy librar%s", len(libraries), "y" if len(libraries) == 1 else "ies")
    return libraries
