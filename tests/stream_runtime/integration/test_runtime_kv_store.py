from __future__ import annotations

import pytest

from stream_runtime.integration.kv_store import InMemoryKvStore, KVStore


def test_kv_store_set_get_delete_roundtrip() -> None:
    store = InMemoryKvStore("agg")
    store.set("x", {"k": "v"})
    assert store.get("x") == {"k": "v"}
    store.delete("x")
    assert store.get("x") is None


def test_kv_store_get_missing_returns_none() -> None:
    store = InMemoryKvStore()
    assert store.get("missing") is None


def test_kv_store_none_value_deletes_key() -> None:
    # Table tombstones remove the key instead of storing None.
    store = InMemoryKvStore()
    store.set("x", 1)
    store.set("x", None)
    assert list(store.all()) == []


def test_kv_store_iterates_in_first_insertion_order() -> None:
    store = InMemoryKvStore()
    store.set("y", 1)
    store.set("x", 2)
    store.set("y", 3)
    assert list(store.all()) == [("y", 3), ("x", 2)]
    assert len(store) == 2


def test_kv_store_close_clears_state() -> None:
    store = InMemoryKvStore()
    store.set(1, 1)
    store.close()
    assert len(store) == 0


def test_kv_store_port_is_abstract() -> None:
    with pytest.raises(NotImplementedError):
        KVStore().get("x")
