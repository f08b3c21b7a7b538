from .kv_store import InMemoryKvStore, InvalidStoreTypeError, KVStore, StoreSnapshot, UnknownStoreError
from .topic import InMemoryTopic, TopicPort
from .window_store import InMemoryWindowStore, WindowStore

__all__ = [
    "InMemoryKvStore",
    "InvalidStoreTypeError",
    "KVStore",
    "StoreSnapshot",
    "UnknownStoreError",
    "InMemoryTopic",
    "TopicPort",
    "InMemoryWindowStore",
    "WindowStore",
]
