from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple

from kafka import KafkaAdminClient, KafkaConsumer, KafkaProducer, TopicPartition
from kafka.admin import NewTopic
from kafka.errors import KafkaError, TopicAlreadyExistsError

from kafkagate.utils.logger_util import get_logger

from .errors import TopicExists, TransportError

logger = get_logger(__name__)

Headers = Sequence[Tuple[str, bytes]]


@dataclass(frozen=True)
class BrokerRecord:
    topic: str
    partition: int
    offset: int
    key: Optional[bytes]
    value: Optional[bytes]


class BrokerTransport(Protocol):
    """Pluggable broker interface used by the HTTP gateway.

    Implementations raise ``TransportError`` for broker-side failures and
    ``TopicExists`` when creating a topic that is already present.
    """

    def create_topic(self, topic: str, num_partitions: int = 1, replication_factor: int = 1) -> None:
        ...

    def list_topics(self) -> List[str]:
        ...

    def publish(self, topic: str, value: bytes, key: Optional[bytes] = None, headers: Optional[Headers] = None) -> None:
        ...

    def read_messages(self, topic: str) -> Iterator[BrokerRecord]:
        ...


class KafkaBroker:
    """Kafka transport backed by kafka-python.

    No connection is kept between calls: every operation opens its own admin
    client, producer or consumer and closes it before returning (or, for
    ``read_messages``, when the returned iterator is exhausted or closed).
    """

    def __init__(
        self,
        brokers: Sequence[str] | None = None,
        publish_timeout_sec: float = 10,
        consumer_timeout_ms: int = 1000,
        fetch_min_bytes: int = 10_000,
        fetch_max_bytes: int = 10_000_000,
        client_id: str = "kafkagate",
    ):
        self.brokers = list(brokers or ["localhost:9092"])
        self.publish_timeout_sec = float(publish_timeout_sec)
        self.consumer_timeout_ms = int(consumer_timeout_ms)
        self.fetch_min_bytes = int(fetch_min_bytes)
        self.fetch_max_bytes = int(fetch_max_bytes)
        self.client_id = client_id

    def _admin(self) -> KafkaAdminClient:
        try:
            return KafkaAdminClient(bootstrap_servers=self.brokers, client_id=self.client_id)
        except KafkaError as exc:
            raise TransportError(f"failed to connect to {','.join(self.brokers)}: {exc}") from exc

    def create_topic(self, topic: str, num_partitions: int = 1, replication_factor: int = 1) -> None:
        admin = self._admin()
        try:
            admin.create_topics(
                new_topics=[NewTopic(name=topic, num_partitions=num_partitions, replication_factor=replication_factor)],
                validate_only=False,
            )
        except TopicAlreadyExistsError as exc:
            raise TopicExists(topic) from exc
        except KafkaError as exc:
            raise TransportError(f"failed to create topic {topic!r}: {exc}") from exc
        finally:
            admin.close()
        logger.info("created topic %s partitions=%s replication=%s", topic, num_partitions, replication_factor)

    def list_topics(self) -> List[str]:
        admin = self._admin()
        try:
            topics = admin.list_topics()
        except KafkaError as exc:
            raise TransportError(f"failed to list topics: {exc}") from exc
        finally:
            admin.close()
        return sorted(set(topics))

    def publish(self, topic: str, value: bytes, key: Optional[bytes] = None, headers: Optional[Headers] = None) -> None:
        try:
            producer = KafkaProducer(bootstrap_servers=self.brokers, client_id=self.client_id)
        except KafkaError as exc:
            raise TransportError(f"failed to connect to {','.join(self.brokers)}: {exc}") from exc
        try:
            future = producer.send(topic, value=value, key=key, headers=list(headers or []))
            meta = future.get(timeout=self.publish_timeout_sec)
            logger.debug("wrote to %s partition=%s offset=%s", topic, meta.partition, meta.offset)
        except KafkaError as exc:
            raise TransportError(f"failed to write message to {topic!r}: {exc}") from exc
        finally:
            producer.close(timeout=self.publish_timeout_sec)

    def read_messages(self, topic: str) -> Iterator[BrokerRecord]:
        """Open a consumer on partition 0 of ``topic`` and return a record iterator.

        Connection errors are raised here, before any record is produced, so
        callers can still answer with an error status. Errors while reading
        end the iteration.
        """
        try:
            consumer = KafkaConsumer(
                bootstrap_servers=self.brokers,
                client_id=self.client_id,
                group_id=None,
                enable_auto_commit=False,
                auto_offset_reset="earliest",
                consumer_timeout_ms=self.consumer_timeout_ms,
                fetch_min_bytes=self.fetch_min_bytes,
                fetch_max_bytes=self.fetch_max_bytes,
            )
        except KafkaError as exc:
            raise TransportError(f"failed to connect to {','.join(self.brokers)}: {exc}") from exc
        try:
            tp = TopicPartition(topic, 0)
            consumer.assign([tp])
            consumer.seek_to_beginning(tp)
        except KafkaError as exc:
            consumer.close()
            raise TransportError(f"failed to open reader for {topic!r}: {exc}") from exc
        return self._iter_records(consumer, topic)

    def _iter_records(self, consumer: KafkaConsumer, topic: str) -> Iterator[BrokerRecord]:
        try:
            for m in consumer:
                yield BrokerRecord(topic=m.topic, partition=m.partition, offset=m.offset, key=m.key, value=m.value)
        except KafkaError as exc:
            logger.error("stopped reading %s: %s", topic, exc)
        finally:
            consumer.close()


def create_broker(name: str | None = None, **kwargs) -> BrokerTransport:
    n = (name or "kafka").strip().lower()
    if n in ("memory", "mock", "inmemory"):
        from .memory import InMemoryBroker

        return InMemoryBroker(**kwargs)
    if n == "kafka":
        return KafkaBroker(**kwargs)
    raise ValueError(f"Unknown broker adapter name: {name}")
