"""Tests for catalog path expansion and path resolution."""

import pytest

from docindex_mcp.errors import MalformedRecord
from docindex_mcp.index import ItemCatalog, ItemKind, StringTable, load_index
from docindex_mcp.index.models import Item


def _compressed_index():
    return load_index(
        {
            "name": "graphtest",
            "strings": ["graphtest::ops", "SuperIndex"],
            "doc": "",
            "items": [
                [8, 1, 0, "trait", None, None],
                [11, "enumerate", "", "", 0, [["self"], "zip"]],
                [16, "IndexIter", "", "", 0, None],
                [5, "helper", "", "", None, None],
            ],
            "parents": [[8, 1]],
        }
    )


def test_only_first_item_carries_path():
    index = _compressed_index()
    paths = [index.text(item.path) for item in index.catalog]
    assert paths == ["graphtest::ops"] * 4


def test_resolve_qualifies_members_with_owner():
    index = _compressed_index()
    assert index.resolve_path(0) == "graphtest::ops::SuperIndex"
    assert index.resolve_path(1) == "graphtest::ops::SuperIndex::enumerate"
    assert index.resolve_path(3) == "graphtest::ops::helper"
    assert index.resolver.display_name(2) == "SuperIndex::IndexIter"
    assert index.resolver.display_name(3) == "helper"


def test_resolver_caches_lazily():
    index = _compressed_index()
    resolver = index.resolver
    assert resolver.cached_count == 0
    first = resolver.resolve(1)
    assert resolver.cached_count == 1
    assert resolver.resolve(1) is first


def test_precompute_fills_cache():
    index = _compressed_index()
    index.resolver.precompute()
    assert index.resolver.cached_count == len(index)


@pytest.mark.parametrize("position", [-1, 4])
def test_resolve_out_of_range(position):
    with pytest.raises(IndexError):
        _compressed_index().resolve_path(position)


def test_catalog_iteration_is_restartable():
    index = _compressed_index()
    first = [index.text(item.name) for item in index.catalog]
    second = [index.text(item.name) for item in index.catalog]
    assert first == second == ["SuperIndex", "enumerate", "IndexIter", "helper"]
    assert index.catalog[1].kind is ItemKind.METHOD


def test_catalog_rejects_leading_empty_path():
    strings = StringTable()
    items = [Item(kind=ItemKind.FUNCTION, name="f", path="")]
    with pytest.raises(MalformedRecord):
        ItemCatalog.expand(items, strings)


def test_empty_path_handle_also_inherits():
    strings = StringTable(["root", ""])
    items = [
        Item(kind=ItemKind.FUNCTION, name="a", path=0),
        Item(kind=ItemKind.FUNCTION, name="b", path=1),
    ]
    catalog = ItemCatalog.expand(items, strings)
    assert catalog[1].path == 0


@pytest.mark.parametrize("position", [-1, 4, True])
def test_index_accessors_reject_out_of_range_positions(position):
    index = _compressed_index()
    with pytest.raises(IndexError):
        index.catalog[position]
    with pytest.raises(IndexError):
        index.to_match(position)
    with pytest.raises(IndexError):
        index.owner_of(position)


def test_catalog_slices_still_work():
    index = _compressed_index()
    assert [index.text(item.name) for item in index.catalog[1:3]] == ["enumerate", "IndexIter"]
