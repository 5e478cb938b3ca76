"""Client-side failures of the publish pipeline.

Every error here is caused by the request and maps to HTTP 400. Broker
failures live in ``kafkagate.broker.errors``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple

from .results import Violation


class DispatchError(Exception):
    kind = "DispatchError"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
        # set by dispatch() to the last stage reached before the failure
        self.stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.detail}


class MissingTopic(DispatchError):
    kind = "MissingTopic"

    def __init__(self, detail: str = "topic name is required"):
        super().__init__(detail)


class DecodeError(DispatchError):
    kind = "DecodeError"


class UnknownType(DispatchError):
    kind = "UnknownType"

    def __init__(self, type_id: str):
        super().__init__(f"unknown message type: {type_id!r}")
        self.type_id = type_id

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["type"] = self.type_id
        return out


class MalformedContent(DispatchError):
    kind = "MalformedContent"


class FieldCoercionError(DispatchError):
    kind = "FieldCoercionError"

    def __init__(self, fields: Iterable[str], detail: str | None = None):
        self.fields: Tuple[str, ...] = tuple(fields)
        super().__init__(detail or f"cannot coerce field(s): {', '.join(self.fields)}")

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["fields"] = list(self.fields)
        return out


class ValidationFailed(DispatchError):
    kind = "ValidationFailed"

    def __init__(self, violations: Iterable[Violation]):
        self.violations: Tuple[Violation, ...] = tuple(violations)
        names = ", ".join(v.field for v in self.violations)
        super().__init__(f"missing required field(s): {names}")

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(v.field for v in self.violations)

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["violations"] = [v.to_dict() for v in self.violations]
        return out
