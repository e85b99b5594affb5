"""Kafka sink for publishing catalog change events."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from catalog_sync.config import KafkaConfig
from catalog_sync.exceptions import SinkError
from catalog_sync.models.base import CatalogEvent
from catalog_sync.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Publish catalog change events, one topic per entity kind.

    Topic is ``<prefix>.<kind>`` (``catalog.listings``) and the message key
    is ``<source_id>:<external_id>``, so every change of one record lands in
    the same partition in order.
    """

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def topic_for(self, event: CatalogEvent) -> str:
        """Topic of an event: prefix plus the entity kind of its type."""
        kind = event.event_type.split(".", 1)[0]
        return f"{self.config.topic_prefix}.{kind}"

    def send(self, event: CatalogEvent) -> None:
        """Send a single event."""
        value = json.dumps(to_dict(event), ensure_ascii=False, default=str).encode("utf-8")
        key = f"{event.source}:{event.subject}"
        try:
            self.producer.produce(
                topic=self.topic_for(event),
                key=key.encode("utf-8"),
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            raise SinkError(f"Failed to enqueue {event.event_type} for {key}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def publish(self, events: list[CatalogEvent]) -> None:
        """Send a batch of events and wait for delivery."""
        logger.info("Publishing %d catalog events", len(events))
        failed_before = self.stats.failed

        for event in events:
            self.send(event)

        self.flush()
        failed = self.stats.failed - failed_before
        if failed:
            raise SinkError(f"{failed} catalog events were not delivered")
        logger.info("Batch complete: sent=%d, delivered=%d, failed=%d",
                    self.stats.sent, self.stats.delivered, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d messages still queued after flush", remaining)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
