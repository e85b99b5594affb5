"""Configuration management for catalog-sync."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from catalog_sync.exceptions import ConfigurationError
from catalog_sync.models.enums import FeedSchema

STORE_BACKENDS = ("json", "postgres")


@dataclass
class KafkaConfig:
    """Kafka producer configuration for catalog change events."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "catalog"

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
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "catalog"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "app_data"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StoreConfig:
    """Catalog persistence configuration."""

    backend: str = "json"
    json_path: Path = field(default_factory=lambda: Path("data") / "catalog.json")
    # Start from an empty catalog instead of failing when none exists yet
    initialize_missing: bool = True

    def __post_init__(self) -> None:
        if self.backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.backend!r}, expected one of {STORE_BACKENDS}"
            )


@dataclass
class SourceConfig:
    """A configured feed: its stable id, row schema and field mapping."""

    source_id: str
    schema: FeedSchema = FeedSchema.GENERIC
    mapping: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.source_id:
            raise ConfigurationError("source_id must not be empty")
        if not isinstance(self.schema, FeedSchema):
            try:
                self.schema = FeedSchema(self.schema)
            except ValueError as e:
                raise ConfigurationError(f"Unknown feed schema {self.schema!r}") from e
        if not isinstance(self.mapping, dict):
            raise ConfigurationError("Field mapping must be an object of field -> column")
        for canonical, column in self.mapping.items():
            if not isinstance(column, str) or not column:
                raise ConfigurationError(
                    f"Mapping for {canonical!r} must be a non-empty column name"
                )


@dataclass
class CatalogSyncConfig:
    """Main configuration for catalog-sync."""

    store: StoreConfig = field(default_factory=StoreConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig | None = None
    mapping: dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "CatalogSyncConfig":
        """Create config from environment variables."""
        import json
        import os

        store = StoreConfig(
            backend=os.getenv("CATALOG_BACKEND", "json"),
            json_path=Path(os.getenv("CATALOG_PATH", str(Path("data") / "catalog.json"))),
            initialize_missing=os.getenv("CATALOG_INIT", "true").lower() == "true",
        )

        try:
            port = int(os.getenv("POSTGRES_PORT", "5432"))
        except ValueError as e:
            raise ConfigurationError("POSTGRES_PORT must be an integer") from e

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=port,
            database=os.getenv("POSTGRES_DB", "catalog"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("POSTGRES_TABLE", "app_data"),
        )

        kafka = None
        if os.getenv("KAFKA_BOOTSTRAP_SERVERS"):
            kafka = KafkaConfig(
                bootstrap_servers=os.environ["KAFKA_BOOTSTRAP_SERVERS"],
                acks=os.getenv("KAFKA_ACKS", "all"),
                topic_prefix=os.getenv("KAFKA_TOPIC_PREFIX", "catalog"),
            )

        mapping_str = os.getenv("FIELD_MAPPING")
        try:
            mapping = json.loads(mapping_str) if mapping_str else {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"FIELD_MAPPING is not valid JSON: {e}") from e
        if not isinstance(mapping, dict):
            raise ConfigurationError("FIELD_MAPPING must be a JSON object")

        return cls(
            store=store,
            postgres=postgres,
            kafka=kafka,
            mapping=mapping,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
