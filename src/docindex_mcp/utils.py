"""Validation models and utilities for docindex MCP tools."""

from typing import Annotated, Optional

from pydantic import Field
from pydantic.functional_validators import AfterValidator

from docindex_mcp.index.paths import PATH_SEPARATOR


# Search limits
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 50


def normalize_input(value: Optional[str], lowercase: bool = False) -> str:
    """Normalize user input: collapse whitespace, optionally lowercase."""
    if value is None:
        return ""
    normalized = " ".join(value.split())
    return normalized.lower() if lowercase else normalized


def validate_non_empty_string(value: str) -> str:
    """Validate that a string is not empty after stripping whitespace."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Value cannot be empty or whitespace only")
    return stripped


def normalize_item_path(value: Optional[str]) -> str:
    """Normalize a browse path: trim segments and drop empty ones.

    Dotted input ("graphtest.ops") is accepted as an alias for "graphtest::ops".
    """
    text = normalize_input(value)
    if PATH_SEPARATOR not in text and "." in text:
        text = text.replace(".", PATH_SEPARATOR)
    parts = [part.strip() for part in text.split(PATH_SEPARATOR)]
    return PATH_SEPARATOR.join(part for part in parts if part)


# Name/path search query
SearchQuery = Annotated[
    str,
    AfterValidator(validate_non_empty_string),
    Field(
        ...,
        min_length=1,
        description=(
            "Name or path to search for. Examples: 'enumerate', 'Node', "
            "'SuperIndex::enumerate', 'fn:children', 'trait:graph', "
            "'usize -> vec' (signature types). Case-insensitive."
        ),
    ),
]

# Search limit
SearchLimit = Annotated[
    int,
    Field(
        ge=1,
        le=MAX_SEARCH_LIMIT,
        description=f"Maximum number of results (1-{MAX_SEARCH_LIMIT}).",
    ),
]

LibraryName = Annotated[
    Optional[str],
    Field(description="Restrict to one loaded library (see docindex_list_indexes)"),
]

ItemPath = Annotated[
    Optional[str],
    Field(
        description=(
            "Fully qualified item path to browse. Examples:\n"
            "- None or '': All loaded libraries\n"
            "- 'graphtest': Top-level items of a library\n"
            "- 'graphtest::ops::SuperIndex': A trait and its members\n"
            "- 'graphtest::SimpleGraph::children': A single method"
        ),
    ),
]
