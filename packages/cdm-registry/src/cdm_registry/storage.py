"""Persistent storage capability consumed by contract logic.

The execution environment owns the real key-value store; contracts only
see the KeyValueStore protocol. Keys are hashable tuples whose first
element is a namespace, so fields of one contract never collide:

    ("contract_name_count",)
    ("contract_name_at", 0)
    ("published_address", ("token", 0))

This module provides:
- KeyValueStore: The get/set capability
- InMemoryStore: Dict-backed store for local hosts and tests
- StagedStore: Write buffer giving all-or-nothing invocations
- StorageValue / StorageMapping: Typed views over one namespace
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Generic, Protocol, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

StorageKey = tuple[Hashable, ...]


class KeyValueStore(Protocol):
    """Storage capability provided by the execution environment."""

    def get(self, key: StorageKey) -> Any | None:
        """Return the stored value, or None if the key was never set."""
        ...

    def set(self, key: StorageKey, value: Any) -> None:
        """Store a value under a key."""
        ...


class InMemoryStore:
    """KeyValueStore kept in a dict."""

    def __init__(self) -> None:
        self._data: dict[StorageKey, Any] = {}

    def get(self, key: StorageKey) -> Any | None:
        return self._data.get(key)

    def set(self, key: StorageKey, value: Any) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)

    def snapshot(self) -> dict[StorageKey, Any]:
        """Return a shallow copy of every stored entry."""
        return dict(self._data)


class StagedStore:
    """Buffers writes over a base store until commit().

    Reads see the buffered writes first, then the base store. discard()
    drops everything written since the last commit.
    """

    def __init__(self, base: KeyValueStore) -> None:
        self._base = base
        self._writes: dict[StorageKey, Any] = {}

    def get(self, key: StorageKey) -> Any | None:
        if key in self._writes:
            return self._writes[key]
        return self._base.get(key)

    def set(self, key: StorageKey, value: Any) -> None:
        self._writes[key] = value

    @property
    def pending(self) -> int:
        return len(self._writes)

    def commit(self) -> None:
        for key, value in self._writes.items():
            self._base.set(key, value)
        self._writes.clear()

    def discard(self) -> None:
        self._writes.clear()


class StorageValue(Generic[V]):
    """A single storage slot with a default for "never written"."""

    def __init__(self, store: KeyValueStore, name: str, default: V) -> None:
        self._store = store
        self._key: StorageKey = (name,)
        self._default = default

    def get(self) -> V:
        value = self._store.get(self._key)
        return self._default if value is None else value

    def set(self, value: V) -> None:
        self._store.set(self._key, value)


class StorageMapping(Generic[K, V]):
    """A namespaced mapping inside a KeyValueStore.

    Example:
        >>> owners = StorageMapping[str, Address](store, "owner")
        >>> owners.insert("token", Address.from_hex("0x1"))
        >>> owners.get("token")
        Address(0x0000000000000000000000000000000000000001)
    """

    def __init__(self, store: KeyValueStore, namespace: str) -> None:
        self._store = store
        self._namespace = namespace

    def _key(self, key: K) -> StorageKey:
        return (self._namespace, key)

    def get(self, key: K) -> V | None:
        return self._store.get(self._key(key))

    def insert(self, key: K, value: V) -> None:
        self._store.set(self._key(key), value)

    def contains(self, key: K) -> bool:
        return self.get(key) is not None
