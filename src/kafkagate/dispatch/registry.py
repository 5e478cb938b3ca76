"""Message type registry: type id -> schema (field specs + record model)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Type

from kafkagate.schemas.messages import MessageRecord, PaymentMessage, UserMessage

from .errors import UnknownType


@dataclass(frozen=True)
class FieldSpec:
    name: str
    required: bool
    type: type
    zero: Any


@dataclass(frozen=True)
class MessageSchema:
    type_id: str
    model: Type[MessageRecord]
    fields: Tuple[FieldSpec, ...]

    @property
    def required_fields(self) -> Tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.required)

    @classmethod
    def from_model(cls, type_id: str, model: Type[MessageRecord]) -> "MessageSchema":
        unknown = set(model.REQUIRED) - set(model.model_fields)
        if unknown:
            raise ValueError(f"{model.__name__} marks undeclared field(s) as required: {sorted(unknown)}")
        specs = tuple(
            FieldSpec(name=name, required=name in model.REQUIRED, type=info.annotation, zero=info.default)
            for name, info in model.model_fields.items()
        )
        return cls(type_id=type_id, model=model, fields=specs)


class SchemaRegistry:
    """In-process registry of message schemas.

    Lookups are read-only; once ``freeze()`` has been called the registry can
    be shared between request handlers without locking.
    """

    def __init__(self) -> None:
        self._schemas: Dict[str, MessageSchema] = {}
        self._frozen = False

    def register(self, type_id: str, model: Type[MessageRecord], *, override: bool = False) -> MessageSchema:
        if self._frozen:
            raise ValueError("registry is frozen")
        if type_id in self._schemas and not override:
            raise ValueError(f"message type already registered: {type_id!r}")
        schema = MessageSchema.from_model(type_id, model)
        self._schemas[type_id] = schema
        return schema

    def lookup(self, type_id: str) -> MessageSchema:
        schema = self._schemas.get(type_id)
        if schema is None:
            raise UnknownType(type_id)
        return schema

    def freeze(self) -> "SchemaRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def type_ids(self) -> Tuple[str, ...]:
        return tuple(self._schemas)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._schemas


def build_default_registry() -> SchemaRegistry:
    registry = SchemaRegistry()
    registry.register("new_user", UserMessage)
    registry.register("new_payment", PaymentMessage)
    return registry.freeze()


DEFAULT_REGISTRY = build_default_registry()
