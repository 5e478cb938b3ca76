"""Wire models for the publish endpoint (request envelope and typed message records).

Records are lenient about unknown keys and strict about value types; required
fields are enforced by ``kafkagate.dispatch`` rather than by pydantic so that
callers get every missing field in one response.
"""

from .envelope import Envelope
from .messages import MessageRecord, PaymentMessage, UserMessage

__all__ = ["Envelope", "MessageRecord", "PaymentMessage", "UserMessage"]
