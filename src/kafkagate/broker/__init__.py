from .adapters import BrokerRecord, BrokerTransport, KafkaBroker, create_broker
from .errors import BrokerError, TopicExists, TransportError
from .memory import InMemoryBroker

__all__ = [
    "BrokerRecord",
    "BrokerTransport",
    "KafkaBroker",
    "create_broker",
    "BrokerError",
    "TopicExists",
    "TransportError",
    "InMemoryBroker",
]
