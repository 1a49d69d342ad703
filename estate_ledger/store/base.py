"""Key-value store interface backing every persisted collection."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Stores each collection as one JSON-compatible list under its own key.

    Reads never fail: a missing or unreadable collection is an empty list.
    Writes replace the whole collection and raise
    :class:`~estate_ledger.exceptions.StorageError` on failure.
    """

    @abstractmethod
    def read(self, key: str) -> list[dict]:
        """Return the records stored under ``key``."""

    @abstractmethod
    def write(self, key: str, records: list[dict]) -> None:
        """Replace the records stored under ``key``."""

    def keys(self) -> list[str]:
        """Return the collection keys currently held."""
        return []
