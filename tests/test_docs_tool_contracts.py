"""Contract tests for documentation tool response structures."""

import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from docindex_mcp.server import create_server
from docindex_mcp.store import IndexStore
from docindex_mcp.tools.search_index import search_payload


def _parse_tool_payload(result) -> dict:
    assert result is not None
    assert len(result.content) > 0
    text = result.content[0].text
    assert text.startswith("{")
    return json.loads(text)


async def _call(store: IndexStore, name: str, arguments: dict) -> dict:
    async with Client(create_server(store)) as client:
        result = await client.call_tool(name, arguments)
    return _parse_tool_payload(result)


@pytest.mark.asyncio
async def test_tools_are_registered(store) -> None:
    async with Client(create_server(store)) as client:
        tools = await client.list_tools()
    assert {tool.name for tool in tools} == {
        "docindex_list_indexes",
        "docindex_search",
        "docindex_browse",
    }


@pytest.mark.asyncio
async def test_list_indexes_contract(store) -> None:
    payload = await _call(store, "docindex_list_indexes", {})
    data = payload["data"]

    assert payload["ok"] is True
    assert payload.get("error") is None
    assert data["source"] == "docindex"
    assert data["action"] == "list"
    assert [entry["library"] for entry in data["entries"]] == ["graphtest", "demo"]
    assert data["entries"][0]["items"] == 29
    assert data["summary"]["count"] == 2


@pytest.mark.asyncio
async def test_search_contract(store) -> None:
    payload = await _call(store, "docindex_search", {"query": "enumerate", "limit": 5})
    data = payload["data"]

    assert payload["ok"] is True
    assert data["action"] == "search"
    assert data["summary"]["count"] == 1
    assert data["summary"]["libraries"] == ["graphtest", "demo"]
    entry = data["entries"][0]
    assert entry["rank"] == 1
    assert entry["path"] == "graphtest::ops::SuperIndex::enumerate"
    assert entry["kind"] == "method"
    assert entry["display_name"] == "SuperIndex::enumerate"
    assert entry["signature"] == "(self) -> zip"
    assert entry["library"] == "graphtest"


@pytest.mark.asyncio
async def test_search_single_library_contract(store) -> None:
    payload = await _call(store, "docindex_search", {"query": "Foo", "library": "demo"})
    data = payload["data"]

    assert payload["ok"] is True
    assert [e["display_name"] for e in data["entries"]][:2] == ["Foo", "FooBar"]
    assert [e["rank"] for e in data["entries"]] == list(range(1, len(data["entries"]) + 1))
    assert data["summary"]["libraries"] == ["demo"]


@pytest.mark.asyncio
async def test_search_no_match_is_ok(store) -> None:
    payload = await _call(store, "docindex_search", {"query": "zzz-no-match"})
    assert payload["ok"] is True
    assert payload["data"]["entries"] == []
    assert payload["data"]["summary"]["count"] == 0


@pytest.mark.asyncio
async def test_search_unknown_library_contract(store) -> None:
    payload = await _call(store, "docindex_search", {"query": "into", "library": "nope"})

    assert payload["ok"] is False
    assert payload["error"]["code"] == "library_not_found"
    details = payload["error"]["details"]
    assert details["library"] == "nope"
    assert details["available"] == ["graphtest", "demo"]


@pytest.mark.asyncio
async def test_search_before_load_contract() -> None:
    payload = await _call(IndexStore(), "docindex_search", {"query": "into"})

    assert payload["ok"] is False
    assert payload["error"]["code"] == "index_not_ready"


@pytest.mark.asyncio
async def test_search_rejects_out_of_range_limit(store) -> None:
    with pytest.raises(ToolError):
        await _call(store, "docindex_search", {"query": "into", "limit": 0})


@pytest.mark.asyncio
async def test_browse_root_contract(store) -> None:
    payload = await _call(store, "docindex_browse", {})
    data = payload["data"]

    assert payload["ok"] is True
    assert data["action"] == "browse"
    assert data["summary"] == {"path": "", "count": 2}
    assert data["entries"][1] == {"library": "demo", "doc": "demo library", "items": 7}


@pytest.mark.asyncio
async def test_browse_item_with_children_contract(store) -> None:
    payload = await _call(store, "docindex_browse", {"path": "graphtest::SimpleGraph"})
    data = payload["data"]

    assert payload["ok"] is True
    assert [e["kind"] for e in data["entries"]] == ["trait"]
    summary = data["summary"]
    assert summary["path"] == "graphtest::SimpleGraph"
    assert [c["display_name"] for c in summary["children"]] == [
        "SimpleGraph::C",
        "SimpleGraph::nodes",
        "SimpleGraph::children",
        "SimpleGraph::ancestors",
        "SimpleGraph::get_topological_order",
    ]
    assert summary["child_count"] == 5


@pytest.mark.asyncio
async def test_browse_accepts_dotted_path(store) -> None:
    payload = await _call(store, "docindex_browse", {"path": "demo.baz"})
    data = payload["data"]

    assert payload["ok"] is True
    assert data["entries"][0]["path"] == "demo::baz"
    assert [c["path"] for c in data["summary"]["children"]] == ["demo::baz::BazFoo"]


@pytest.mark.asyncio
async def test_browse_library_contract(store) -> None:
    payload = await _call(store, "docindex_browse", {"path": "graphtest"})
    data = payload["data"]

    assert payload["ok"] is True
    assert data["entries"] == []
    assert "graphtest::ops" in [c["path"] for c in data["summary"]["children"]]


@pytest.mark.asyncio
async def test_browse_not_found_contract(store) -> None:
    payload = await _call(store, "docindex_browse", {"path": "graphtest::ops::Missing"})

    assert payload["ok"] is False
    assert payload["error"]["code"] == "path_not_found"
    details = payload["error"]["details"]
    assert details["path"] == "graphtest::ops::Missing"
    assert details["fallback_path"] == "graphtest::ops"
    assert details["libraries"] == ["graphtest", "demo"]


def test_search_payload_without_tool_layer(store) -> None:
    payload = search_payload(store, "trait:simple", 3)
    assert payload["ok"] is True
    assert [e["path"] for e in payload["data"]["entries"]] == ["graphtest::SimpleGraph"]
