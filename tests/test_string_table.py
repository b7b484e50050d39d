"""Tests for the interning string table."""

import pytest

from docindex_mcp.index.strings import StringTable


class TestStringTable:
    def test_intern_returns_stable_handles(self):
        table = StringTable()
        first = table.intern("vec")
        second = table.intern("str")
        assert table.intern("vec") == first
        assert first != second
        assert len(table) == 2

    def test_resolve_round_trips(self):
        table = StringTable()
        handle = table.intern("graphtest::ops")
        assert table.resolve(handle) == "graphtest::ops"

    @pytest.mark.parametrize("handle", [-1, 2, 100])
    def test_resolve_out_of_range_raises_index_error(self, handle):
        table = StringTable(["a", "b"])
        with pytest.raises(IndexError):
            table.resolve(handle)

    def test_resolve_ref_passes_inline_literals(self):
        table = StringTable(["shared"])
        assert table.resolve_ref("inline") == "inline"
        assert table.resolve_ref(0) == "shared"

    def test_loaded_duplicates_keep_first_handle(self):
        table = StringTable(["x", "y", "x"])
        assert table.intern("x") == 0
        assert table.resolve(2) == "x"

    def test_frozen_table_rejects_new_text(self):
        table = StringTable(["a"]).freeze()
        assert table.intern("a") == 0
        with pytest.raises(TypeError):
            table.intern("b")

    def test_only_text_can_be_interned(self):
        with pytest.raises(TypeError):
            StringTable().intern(3)
