"""Kafka sink for publishing ledger events."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from estate_ledger.exceptions import SinkError
from estate_ledger.store.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str
    acks: str = "all"  # "0", "1", "all"
    linger_ms: int = 5
    compression: str = "snappy"  # none, gzip, snappy, lz4
    retries: int = 3
    client_id: str = "estate-ledger"


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Publish events to Kafka topics, keyed by property."""

    def __init__(self, config: ProducerConfig | str, producer: Any | None = None) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : ProducerConfig | str
            Producer configuration or bootstrap servers string.
        producer : Any | None
            Pre-built producer; a ``confluent_kafka.Producer`` is created when omitted.
        """
        if isinstance(config, str):
            config = ProducerConfig(bootstrap_servers=config)

        self.config = config
        self.producer = producer if producer is not None else self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        try:
            return Producer(
                {
                    "bootstrap.servers": self.config.bootstrap_servers,
                    "acks": self.config.acks,
                    "retries": self.config.retries,
                    "linger.ms": self.config.linger_ms,
                    "compression.type": self.config.compression,
                    "client.id": self.config.client_id,
                }
            )
        except KafkaException as e:
            raise SinkError(f"Cannot create Kafka producer: {e}") from e

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    @staticmethod
    def _get_key(data: dict) -> str | None:
        payload = data.get("data")
        if isinstance(payload, dict) and payload.get("property_id"):
            return payload["property_id"]
        return data.get("subject")

    def send(self, topic: str, record: Any) -> None:
        """Send a single record to a Kafka topic."""
        data = to_dict(record)
        key = self._get_key(data)
        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=json.dumps(data, ensure_ascii=False).encode("utf-8"),
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            raise SinkError(f"Failed to produce to {topic}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to a Kafka topic."""
        for record in records:
            self.send(topic, record)
        self.flush()

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
