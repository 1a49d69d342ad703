"""JSON Lines sink appending ledger events to per-topic files."""

import json
import logging
from pathlib import Path
from typing import Any

from estate_ledger.exceptions import SinkError
from estate_ledger.store.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonLinesSink:
    """Append events to ``<topic>.jsonl`` files."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._counts: dict[str, int] = {}

    def path_for(self, topic: str) -> Path:
        # Use topic name as filename (replace dots with underscores)
        return self.output_dir / (topic.replace(".", "_") + ".jsonl")

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Append a batch of records to the topic file."""
        file_path = self.path_for(topic)
        try:
            with open(file_path, "a", encoding="utf-8") as f:
                for record in records:
                    f.write(json.dumps(to_dict(record), ensure_ascii=False) + "\n")
        except OSError as e:
            raise SinkError(f"Failed to append to {file_path}: {e}") from e

        self._counts[topic] = self._counts.get(topic, 0) + len(records)

    def close(self) -> None:
        """Log summary."""
        for topic, count in self._counts.items():
            logger.info("%s: %d events written to %s", topic, count, self.path_for(topic))
