from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

from kafkagate.utils.logger_util import get_logger

from .adapters import BrokerRecord, Headers
from .errors import TopicExists, TransportError

logger = get_logger(__name__)


class InMemoryBroker:
    """In-process broker with append-only topics, for tests and local dev.

    Every topic has a single partition. Publishing to an unknown topic creates
    it, matching a Kafka cluster with topic auto-creation enabled.
    """

    def __init__(self, auto_create_topics: bool = True):
        self.auto_create_topics = bool(auto_create_topics)
        self._topics: Dict[str, List[BrokerRecord]] = {}
        self._headers: Dict[str, List[List[tuple]]] = {}
        self._lock = threading.Lock()

    def _ensure_topic(self, topic: str) -> List[BrokerRecord]:
        if topic not in self._topics:
            self._topics[topic] = []
            self._headers[topic] = []
        return self._topics[topic]

    def create_topic(self, topic: str, num_partitions: int = 1, replication_factor: int = 1) -> None:
        with self._lock:
            if topic in self._topics:
                raise TopicExists(topic)
            self._ensure_topic(topic)
        logger.info("created topic %s", topic)

    def list_topics(self) -> List[str]:
        with self._lock:
            return sorted(self._topics)

    def publish(self, topic: str, value: bytes, key: Optional[bytes] = None, headers: Optional[Headers] = None) -> None:
        with self._lock:
            if topic not in self._topics and not self.auto_create_topics:
                raise TransportError(f"unknown topic: {topic!r}")
            records = self._ensure_topic(topic)
            records.append(BrokerRecord(topic=topic, partition=0, offset=len(records), key=key, value=value))
            self._headers[topic].append(list(headers or []))

    def read_messages(self, topic: str) -> Iterator[BrokerRecord]:
        # readers see the topic as of the call
        with self._lock:
            snapshot = list(self._topics.get(topic, ()))
        return iter(snapshot)

    def headers_for(self, topic: str, offset: int) -> List[tuple]:
        """Headers stored with the record at ``offset``; the read path does not return them."""
        with self._lock:
            return list(self._headers[topic][offset])
