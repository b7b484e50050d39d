"""Tests for environment-driven configuration."""

import os

import pytest

from docindex_mcp.config import DocIndexConfig, get_config
from docindex_mcp.index import DEFAULT_POLICY, ItemKind

ENV_VARS = ("DOCINDEX_PATHS", "DOCINDEX_KIND_ORDER", "DOCINDEX_LOG_LEVEL", "DOCINDEX_STRICT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = get_config()
    assert config.index_paths == ()
    assert config.kind_order == ()
    assert config.log_level == "WARNING"
    assert config.strict is True
    assert config.ranking_policy() is DEFAULT_POLICY


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DOCINDEX_PATHS", os.pathsep.join(["a.json", "", "b.js"]))
    monkeypatch.setenv("DOCINDEX_KIND_ORDER", "method, fn")
    monkeypatch.setenv("DOCINDEX_LOG_LEVEL", " debug ")
    monkeypatch.setenv("DOCINDEX_STRICT", "no")

    config = get_config()
    assert config.index_paths == ("a.json", "b.js")
    assert config.kind_order == ("method", "fn")
    assert config.log_level == "DEBUG"
    assert config.strict is False

    policy = config.ranking_policy()
    assert policy.priority(ItemKind.METHOD) == 0
    assert policy.priority(ItemKind.FUNCTION) == 1


def test_unknown_kind_order_falls_back_to_default(caplog):
    config = DocIndexConfig(index_paths=(), kind_order=("fn", "widget"), log_level="INFO", strict=True)
    assert config.ranking_policy() is DEFAULT_POLICY
    assert "DOCINDEX_KIND_ORDER" in caplog.text
