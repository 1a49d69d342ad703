"""Pluggable key-value storage for ledger collections."""

from estate_ledger.store.base import KeyValueStore
from estate_ledger.store.json_file import JsonFileStore
from estate_ledger.store.memory import InMemoryStore

__all__ = ["InMemoryStore", "JsonFileStore", "KeyValueStore"]
