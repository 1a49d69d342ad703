"""In-memory key-value store."""

import copy
import json
import logging

from estate_ledger.exceptions import StorageError
from estate_ledger.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class InMemoryStore(KeyValueStore):
    """Dict-backed store, isolated from caller mutations.

    Writes are checked for JSON compatibility so that code exercised against
    this store behaves the same once pointed at a file-backed one.
    """

    def __init__(self) -> None:
        self._data: dict[str, list[dict]] = {}

    def read(self, key: str) -> list[dict]:
        return copy.deepcopy(self._data.get(key, []))

    def write(self, key: str, records: list[dict]) -> None:
        try:
            json.dumps(records)
        except (TypeError, ValueError) as e:
            logger.error("Cannot store collection %s: %s", key, e)
            raise StorageError(f"Failed to save {key}: {e}") from e
        self._data[key] = copy.deepcopy(records)

    def keys(self) -> list[str]:
        return sorted(self._data)

    def clear(self) -> None:
        self._data.clear()
