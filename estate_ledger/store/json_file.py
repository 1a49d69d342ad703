"""JSON file store: one array file per collection."""

import json
import logging
import os
import tempfile
from pathlib import Path

from estate_ledger.exceptions import StorageError
from estate_ledger.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Persist collections as ``<key>.json`` files in a directory."""

    def __init__(self, data_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the collection files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> list[dict]:
        file_path = self._path(key)
        if not file_path.exists():
            return []

        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading %s from %s: %s", key, file_path, e, extra={"collection": key})
            return []

        if not isinstance(data, list):
            logger.error("Collection %s is not a JSON array", key, extra={"collection": key})
            return []

        return data

    def write(self, key: str, records: list[dict]) -> None:
        file_path = self._path(key)
        tmp_name = None
        try:
            # Write to a sibling temp file so a failed dump leaves the old file intact
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.data_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(records, f, ensure_ascii=False)
            os.replace(tmp_name, file_path)
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Error saving %s", key, extra={"collection": key})
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to save {key}: {e}") from e

        logger.debug("Saved %d records to %s", len(records), file_path)

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.data_dir.glob("*.json"))
