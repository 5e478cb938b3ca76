from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from kafkagate.schemas.messages import MessageRecord


@dataclass(frozen=True)
class Violation:
    field: str
    reason: str = "required"

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "reason": self.reason}


@dataclass(frozen=True)
class ValidationResult:
    record: MessageRecord
    violations: Tuple[Violation, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.violations


@dataclass(frozen=True)
class CanonicalMessage:
    """Validated record plus the exact bytes handed to the broker."""

    type_id: str
    record: MessageRecord
    value: bytes

    @property
    def headers(self) -> list[tuple[str, bytes]]:
        return [("message-type", self.type_id.encode("utf-8"))]
