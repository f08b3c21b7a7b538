from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


class UnknownStoreError(KeyError):
    # Raised when a store is read that the topology or the caller never declared.
    pass


class InvalidStoreTypeError(TypeError):
    # Raised when a windowed store is read as a plain table or the reverse.
    pass


class KVStore:
    # Keyed state port used by aggregation nodes and read back after a run.
    def get(self, key: object) -> object | None:
        raise NotImplementedError("KVStore.get must be implemented")

    def set(self, key: object, value: object) -> None:
        raise NotImplementedError("KVStore.set must be implemented")

    def delete(self, key: object) -> None:
        raise NotImplementedError("KVStore.delete must be implemented")

    def all(self) -> Iterator[tuple[object, object]]:
        raise NotImplementedError("KVStore.all must be implemented")

    def close(self) -> None:
        raise NotImplementedError("KVStore.close must be implemented")


class InMemoryKvStore(KVStore):
    # In-memory KV adapter for deterministic local runs and tests.
    # Iteration follows first-insertion order of keys.
    def __init__(self, name: str = "") -> None:
        self.name = name
        self._store: dict[object, object] = {}

    def get(self, key: object) -> object | None:
        return self._store.get(key)

    def set(self, key: object, value: object) -> None:
        # Setting None deletes the key, which is how table tombstones behave.
        if value is None:
            self.delete(key)
            return
        self._store[key] = value

    def delete(self, key: object) -> None:
        self._store.pop(key, None)

    def all(self) -> Iterator[tuple[object, object]]:
        return iter(list(self._store.items()))

    def close(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    # Final contents of one store after a run; windowed entries are keyed by WindowKey.
    name: str
    windowed: bool
    entries: dict[object, object] = field(default_factory=dict)
