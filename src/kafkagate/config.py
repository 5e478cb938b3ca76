from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

import dotenv


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    brokers: List[str] = field(default_factory=lambda: ["localhost:9092"])
    broker_adapter: str = "kafka"
    num_partitions: int = 1
    replication_factor: int = 1
    publish_timeout_sec: int = 10
    consumer_timeout_ms: int = 1000
    fetch_min_bytes: int = 10_000  # 10KB
    fetch_max_bytes: int = 10_000_000  # 10MB
    host: str = "0.0.0.0"
    port: int = 8080


def load_settings(env_file: str | None = ".env") -> Settings:
    """Build Settings from an optional .env file and the process environment.

    Values already present in the environment win over the .env file.
    """
    if env_file:
        dotenv.load_dotenv(env_file)
    brokers = [b.strip() for b in os.environ.get("KAFKA_BROKERS", "localhost:9092").split(",") if b.strip()]
    return Settings(
        brokers=brokers or ["localhost:9092"],
        broker_adapter=os.environ.get("BROKER_ADAPTER", "kafka"),
        num_partitions=_int_env("KAFKA_NUM_PARTITIONS", 1),
        replication_factor=_int_env("KAFKA_REPLICATION_FACTOR", 1),
        publish_timeout_sec=_int_env("KAFKA_PUBLISH_TIMEOUT_SEC", 10),
        consumer_timeout_ms=_int_env("KAFKA_CONSUMER_TIMEOUT_MS", 1000),
        fetch_min_bytes=_int_env("KAFKA_FETCH_MIN_BYTES", 10_000),
        fetch_max_bytes=_int_env("KAFKA_FETCH_MAX_BYTES", 10_000_000),
        host=os.environ.get("KAFKAGATE_HOST", "0.0.0.0"),
        port=_int_env("KAFKAGATE_PORT", 8080),
    )
