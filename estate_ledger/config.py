"""Configuration management for estate-ledger."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from estate_ledger.exceptions import ConfigurationError

STORAGE_BACKENDS = ("memory", "json")
EVENT_SINKS = ("none", "console", "jsonl", "kafka")


@dataclass
class StorageConfig:
    """Where ledger and listing collections live."""

    backend: str = "json"
    data_dir: Path = field(default_factory=lambda: Path("data"))
    pretty_json: bool = False
    transactions_key: str = "agency_transactions"
    listings_key: str = "listings"


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class EventConfig:
    """Where ledger mutation events are published."""

    sink: str = "none"
    topic_prefix: str = "estate"
    output_dir: Path = field(default_factory=lambda: Path("events"))

    @property
    def transactions_topic(self) -> str:
        return f"{self.topic_prefix}.agency-transactions"


@dataclass
class EstateLedgerConfig:
    """Main configuration for estate-ledger."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    events: EventConfig = field(default_factory=EventConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    currency: str = "PKR"
    log_level: str = "INFO"
    log_format: str = "standard"

    def validate(self) -> None:
        """Raise ConfigurationError for unsupported settings."""
        if self.storage.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.storage.backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )
        if self.events.sink not in EVENT_SINKS:
            raise ConfigurationError(
                f"Unknown event sink {self.events.sink!r}; "
                f"expected one of {', '.join(EVENT_SINKS)}"
            )
        if self.log_format not in ("standard", "json"):
            raise ConfigurationError(f"Unknown log format {self.log_format!r}")

    @classmethod
    def from_env(cls) -> "EstateLedgerConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            backend=os.getenv("ESTATE_STORAGE_BACKEND", "json").lower(),
            data_dir=Path(os.getenv("ESTATE_DATA_DIR", "data")),
            pretty_json=os.getenv("ESTATE_PRETTY_JSON", "false").lower() == "true",
            transactions_key=os.getenv("ESTATE_TRANSACTIONS_KEY", "agency_transactions"),
            listings_key=os.getenv("ESTATE_LISTINGS_KEY", "listings"),
        )

        events = EventConfig(
            sink=os.getenv("ESTATE_EVENT_SINK", "none").lower(),
            topic_prefix=os.getenv("ESTATE_TOPIC_PREFIX", "estate"),
            output_dir=Path(os.getenv("ESTATE_EVENT_DIR", "events")),
        )

        try:
            retries = int(os.getenv("KAFKA_RETRIES", "3"))
        except ValueError:
            raise ConfigurationError("KAFKA_RETRIES must be an integer") from None

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            retries=retries,
        )

        config = cls(
            storage=storage,
            events=events,
            kafka=kafka,
            currency=os.getenv("ESTATE_CURRENCY", "PKR"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard").lower(),
        )
        config.validate()
        return config


def build_store(config: EstateLedgerConfig):
    """Instantiate the key-value store selected by ``config``."""
    from estate_ledger.store import InMemoryStore, JsonFileStore

    config.validate()
    if config.storage.backend == "memory":
        return InMemoryStore()
    return JsonFileStore(config.storage.data_dir, pretty=config.storage.pretty_json)


def build_event_sink(config: EstateLedgerConfig):
    """Instantiate the event sink selected by ``config``, or ``None``."""
    config.validate()
    sink = config.events.sink
    if sink == "none":
        return None
    if sink == "console":
        from estate_ledger.sinks import ConsoleSink

        return ConsoleSink(pretty=False)
    if sink == "jsonl":
        from estate_ledger.sinks import JsonLinesSink

        return JsonLinesSink(config.events.output_dir)

    from estate_ledger.sinks.kafka import KafkaSink, ProducerConfig

    return KafkaSink(
        ProducerConfig(
            bootstrap_servers=config.kafka.bootstrap_servers,
            acks=config.kafka.acks,
            linger_ms=config.kafka.linger_ms,
            compression=config.kafka.compression,
            retries=config.kafka.retries,
        )
    )


def build_repository(config: EstateLedgerConfig, store=None):
    """Wire a TransactionRepository from configuration."""
    from estate_ledger.ledger import TransactionRepository

    return TransactionRepository(
        store if store is not None else build_store(config),
        collection=config.storage.transactions_key,
        event_sink=build_event_sink(config),
        topic=config.events.transactions_topic,
    )
