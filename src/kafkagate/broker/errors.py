from __future__ import annotations

from typing import Any, Dict


class BrokerError(Exception):
    kind = "BrokerError"
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.detail}


class TransportError(BrokerError):
    """Broker unreachable or an operation against it failed."""

    kind = "TransportError"


class TopicExists(BrokerError):
    kind = "TopicExists"
    status_code = 409

    def __init__(self, topic: str):
        super().__init__(f"topic already exists: {topic!r}")
        self.topic = topic
