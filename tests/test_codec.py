"""Tests for loading, validating and serializing the native index form."""

import json

import pytest

from docindex_mcp.errors import IndexLoadError, MalformedRecord, OutOfRangeReference
from docindex_mcp.index import (
    ItemKind,
    dump_index_file,
    load_index,
    load_index_file,
    serialize_index,
)
from docindex_mcp.search import search


def _serialized(**overrides):
    data = {
        "name": "lib",
        "strings": ["lib", "Widget"],
        "doc": "a library",
        "items": [
            [3, 1, 0, "a widget", None, None],
            [11, "draw", "", "draws it", 0, [["self"], None]],
            [11, "resize", "", "", 1, None],
        ],
        "parents": [[3, 1], [8, "Shape"]],
    }
    data.update(overrides)
    return data


def test_load_valid_index():
    index = load_index(_serialized())
    assert index.name == "lib"
    assert index.doc == "a library"
    assert len(index) == 3
    assert index.resolve_path(1) == "lib::Widget::draw"
    assert index.resolve_path(2) == "lib::Shape::resize"
    assert index.owner_of(1).kind is ItemKind.RECORD_TYPE


def test_name_argument_overrides_embedded_name():
    assert load_index(_serialized(), name="other").name == "other"


def test_owner_out_of_range_fails_atomically():
    data = _serialized()
    data["items"][2][4] = 99
    result = None
    with pytest.raises(OutOfRangeReference) as excinfo:
        result = load_index(data)
    assert result is None
    assert excinfo.value.context["record"] == 2
    assert excinfo.value.context["field"] == "owner"
    assert isinstance(excinfo.value, IndexError)


@pytest.mark.parametrize(
    "row",
    [
        [3, 7, 0, "", None, None],  # name handle past the table
        [3, "x", -1, "", None, None],  # negative path handle
        [3, "x", "lib", 5, None, None],  # summary handle
        [42, "x", "lib", "", None, None],  # unknown kind code
        [3, "x", "lib", "", None, [[9], None]],  # signature param handle
    ],
)
def test_out_of_range_references(row):
    with pytest.raises(OutOfRangeReference):
        load_index(_serialized(items=[row]))


def test_parent_name_out_of_range():
    with pytest.raises(OutOfRangeReference):
        load_index(_serialized(parents=[[3, 12], [8, "Shape"]]))


@pytest.mark.parametrize(
    "row",
    [
        [3, "x", "lib"],  # too short
        "not a record",
        [3, "x", "lib", "", "0", None],  # owner must be integer
        [3, "x", "lib", "", None, "sig"],  # signature shape
        [3, 1.5, "lib", "", None, None],  # name type
        ["3", "x", "lib", "", None, None],  # kind type
        [3, "", "lib", "", None, None],  # empty name
        [3, "x", "", "", None, None],  # first item without path
    ],
)
def test_malformed_records(row):
    with pytest.raises(MalformedRecord):
        load_index(_serialized(items=[row]))


@pytest.mark.parametrize("missing", ["items", "parents"])
def test_missing_top_level_fields(missing):
    data = _serialized()
    del data[missing]
    with pytest.raises(MalformedRecord):
        load_index(data)


def test_missing_name_is_malformed():
    data = _serialized()
    del data["name"]
    with pytest.raises(MalformedRecord):
        load_index(data)


def test_non_object_input():
    with pytest.raises(IndexLoadError):
        load_index([1, 2, 3])


def test_round_trip_preserves_paths_and_ranking(graph_index):
    reloaded = load_index(json.loads(json.dumps(serialize_index(graph_index))))

    assert len(reloaded) == len(graph_index)
    for position in range(len(graph_index)):
        assert reloaded.resolve_path(position) == graph_index.resolve_path(position)
    for query in ("into", "graph", "SuperIndex", "method:children", "self -> t"):
        assert search(reloaded, query, 10) == search(graph_index, query, 10)


def test_serialize_compresses_repeated_paths(demo_index):
    data = serialize_index(demo_index)
    paths = [row[2] for row in data["items"]]
    # demo, -, demo::baz, demo, -, -, -
    assert paths[1] == ""
    assert paths[2] == "demo::baz"
    assert paths[4:] == ["", "", ""]


def test_serialize_interns_only_repeated_text(demo_index):
    data = serialize_index(demo_index)
    strings = data["strings"]
    assert "demo" in strings
    assert "Render" in strings
    assert "the foo type" not in strings
    # single-use text stays inline
    assert data["items"][0][3] == "the foo type"
    assert data["parents"][0][1] == strings.index("Render")


def test_file_round_trip(tmp_path, demo_index, graph_index):
    target = dump_index_file({"demo": demo_index, "graphtest": graph_index}, tmp_path / "out.json")
    loaded = load_index_file(target)
    assert set(loaded) == {"demo", "graphtest"}
    assert loaded["demo"].resolve_path(4) == "demo::Render::render"


def test_single_index_file_uses_stem_as_name(tmp_path):
    data = _serialized()
    del data["name"]
    path = tmp_path / "widgets.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    assert list(load_index_file(path)) == ["widgets"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_index_file(tmp_path / "nope.json")


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedRecord):
        load_index_file(path)
