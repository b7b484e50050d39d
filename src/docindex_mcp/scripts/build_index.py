#!/usr/bin/env python3
"""Build a native docindex JSON file.

Accepted inputs:
- legacy rustdoc ``search-index.js``
- raw metadata JSON: a list of item records (see ``IndexBuilder``), or an
  object ``{"name": ..., "doc": ..., "records": [...]}``
- native docindex JSON (re-encoded, which also re-densifies it)

Usage:
    docindex-build search-index.js -o graphtest.json
    docindex-build records.json --name mylib --doc "My library" -o mylib.json
"""

import argparse
import json
from pathlib import Path
from typing import Dict, List, Optional

from docindex_mcp.errors import IndexLoadError
from docindex_mcp.index.builder import IndexBuilder
from docindex_mcp.index.codec import dump_index_file, load_index_file
from docindex_mcp.index.library import SearchIndex


def build_from_file(input_path: Path, name: Optional[str] = None, doc: str = "") -> Dict[str, SearchIndex]:
    """Read ``input_path`` and return the indexes it describes."""
    if input_path.suffix == ".js":
        return load_index_file(input_path)

    data = json.loads(input_path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        library = name or input_path.stem
        return {library: IndexBuilder.from_records(library, data, doc=doc)}
    if isinstance(data, dict) and "records" in data:
        library = name or data.get("name") or input_path.stem
        return {library: IndexBuilder.from_records(library, data["records"], doc=doc or data.get("doc", ""))}
    return load_index_file(input_path)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(prog="docindex-build", description=__doc__.splitlines()[0])
    parser.add_argument("input", type=Path, help="search-index.js, raw records JSON or native index JSON")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output JSON path")
    parser.add_argument("--name", help="Library name for raw record input (default: file stem)")
    parser.add_argument("--doc", default="", help="Library doc summary for raw record input")
    args = parser.parse_args(argv)

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}")
        return 1

    try:
        indexes = build_from_file(args.input, name=args.name, doc=args.doc)
    except (IndexLoadError, json.JSONDecodeError) as exc:
        print(f"Error: {args.input}: {exc}")
        return 1

    for library, index in indexes.items():
        print(f"{library}: {len(index)} items, {len(index.parents)} parents")

    dump_index_file(indexes, args.output)
    print(f"Generated: {args.output}")
    return 0


if __name__ == "__main__":
    exit(main())
