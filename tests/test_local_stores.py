"""Tests for the LocalStore implementations."""

import json

import pytest

from networth.local_store import LocalStore
from networth.stores import FileLocalStore, MemoryLocalStore


class TestProtocol:
    def test_implementations_satisfy_protocol(self, tmp_path) -> None:
        assert isinstance(MemoryLocalStore(), LocalStore)
        assert isinstance(FileLocalStore(tmp_path / "store.json"), LocalStore)


class TestMemoryLocalStore:
    def test_get_set(self) -> None:
        store = MemoryLocalStore()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        assert "k" in store

    def test_initial_values_copied(self) -> None:
        initial = {"k": "v"}
        store = MemoryLocalStore(initial)
        store.set("k", "changed")
        assert initial == {"k": "v"}


class TestFileLocalStore:
    def test_missing_file_reads_empty(self, tmp_path) -> None:
        assert FileLocalStore(tmp_path / "nope.json").get("k") is None

    def test_persists_across_instances(self, tmp_path) -> None:
        path = tmp_path / "nested" / "store.json"
        FileLocalStore(path).set("financial_data", '{"transactions": []}')
        assert FileLocalStore(path).get("financial_data") == '{"transactions": []}'

    def test_keys_are_independent(self, tmp_path) -> None:
        store = FileLocalStore(tmp_path / "store.json")
        store.set("a", "1")
        store.set("b", "2")
        store.set("a", "3")
        assert json.loads((tmp_path / "store.json").read_text()) == {"a": "3", "b": "2"}

    def test_no_temp_files_left_behind(self, tmp_path) -> None:
        store = FileLocalStore(tmp_path / "store.json")
        store.set("a", "1")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_non_object_file_raises(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError):
            FileLocalStore(path).get("a")
        assert path.read_text() == "[1, 2, 3]"

    def test_non_string_values_raise(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text('{"financial_data": {"transactions": []}, "ok": "1"}')
        with pytest.raises(ValueError, match="non-string values"):
            FileLocalStore(path).get("ok")
