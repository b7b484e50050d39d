"""Shared fixtures: a small hand-built index and the rustdoc sample index."""

from pathlib import Path

import pytest

from docindex_mcp.index import IndexBuilder, load_index_file
from docindex_mcp.store import IndexStore

FIXTURES = Path(__file__).parent / "fixtures"
LEGACY_INDEX = FIXTURES / "search-index.js"


@pytest.fixture()
def demo_index():
    """Index where "Foo", "FooBar" and "BazFoo" exercise each match class."""
    builder = IndexBuilder("demo", doc="demo library")
    builder.add_item("struct", "Foo", path="demo", summary="the foo type")
    builder.add_item("fn", "FooBar", summary="makes a foo bar")
    builder.add_item("fn", "BazFoo", path="demo::baz", summary="baz then foo")
    builder.add_item("trait", "Render", path="demo")
    builder.add_item("method", "render", owner=("trait", "Render"), params=["self"], returns="string")
    builder.add_item("const", "FOO_LIMIT", summary="limit of foos")
    builder.add_item("mod", "baz")
    return builder.build()


@pytest.fixture()
def legacy_index_path():
    return LEGACY_INDEX


@pytest.fixture()
def graph_index():
    """The rustdoc sample library 'graphtest' from search-index.js."""
    return load_index_file(LEGACY_INDEX)["graphtest"]


@pytest.fixture()
def store(graph_index, demo_index):
    return IndexStore([graph_index, demo_index])
