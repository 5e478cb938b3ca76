"""HTTP gateway for publishing typed, validated messages to Kafka topics."""

__version__ = "0.1.0"
