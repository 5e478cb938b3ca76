"""Typed-message validation and dispatch.

``dispatch`` turns a raw request body into the canonical bytes that are
published to the broker::

    raw bytes -> Envelope -> typed record -> validated record -> CanonicalMessage

Each step raises a ``DispatchError`` subclass on failure. The functions are
pure and synchronous, so a single call can be shared by any number of
concurrent request handlers.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import ValidationError
from pydantic_core import from_json

from kafkagate.schemas.envelope import Envelope
from kafkagate.schemas.messages import MessageRecord
from kafkagate.utils.logger_util import get_logger

from .errors import DecodeError, DispatchError, FieldCoercionError, MalformedContent, MissingTopic, ValidationFailed
from .registry import DEFAULT_REGISTRY, MessageSchema, SchemaRegistry
from .results import CanonicalMessage, ValidationResult, Violation
from .stages import DispatchStage, advance

logger = get_logger(__name__)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def check_topic(topic: Optional[str]) -> str:
    if topic is None or topic.strip() == "":
        raise MissingTopic()
    return topic


def decode_envelope(raw: bytes | str) -> Envelope:
    """Parse the request body into an Envelope.

    Only the top level is checked: the body must be a JSON object with a
    string ``type``. ``content`` is left untouched. ``NaN`` and
    ``Infinity`` are not JSON and are rejected anywhere in the body.
    """
    try:
        data = from_json(raw, allow_inf_nan=False)
        return Envelope.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"invalid envelope: {_describe(exc)}") from exc
    except ValueError as exc:
        # malformed JSON or a body that is not valid UTF-8
        raise DecodeError(f"invalid envelope: {exc}") from exc


def materialize(type_id: str, content: Any, registry: SchemaRegistry = DEFAULT_REGISTRY) -> MessageRecord:
    """Resolve ``type_id`` and coerce ``content`` into its record model.

    Unknown keys are dropped, missing keys keep the field's zero value.
    """
    schema = registry.lookup(type_id)
    if not isinstance(content, dict):
        raise MalformedContent(f"content for {type_id!r} must be an object, got {_json_kind(content)}")
    try:
        return schema.model.model_validate(content)
    except ValidationError as exc:
        fields: List[str] = []
        for err in exc.errors():
            loc = err.get("loc") or ()
            name = str(loc[0]) if loc else ""
            if name and name not in fields:
                fields.append(name)
        raise FieldCoercionError(fields, f"cannot coerce content for {type_id!r}: {_describe(exc)}") from exc


def validate(record: MessageRecord, schema: Optional[MessageSchema] = None) -> ValidationResult:
    """Check required fields, collecting every violation in declared order."""
    if schema is None:
        schema = MessageSchema.from_model(type(record).__name__, type(record))
    violations = [
        Violation(spec.name)
        for spec in schema.required_fields
        if getattr(record, spec.name) == spec.zero
    ]
    return ValidationResult(record=record, violations=tuple(violations))


def serialize(type_id: str, record: MessageRecord) -> CanonicalMessage:
    return CanonicalMessage(type_id=type_id, record=record, value=record.model_dump_json().encode("utf-8"))


def dispatch(raw: bytes | str, registry: SchemaRegistry = DEFAULT_REGISTRY) -> CanonicalMessage:
    """Run the full pipeline over a raw request body.

    Raises:
        DispatchError: the first failing step's error, with ``stage`` set to
            the last stage that completed.
    """
    stage = DispatchStage.START
    try:
        envelope = decode_envelope(raw)
        stage = advance(stage, DispatchStage.DECODED)

        record = materialize(envelope.type, envelope.content, registry)
        stage = advance(stage, DispatchStage.MATERIALIZED)

        result = validate(record, registry.lookup(envelope.type))
        if not result.ok:
            raise ValidationFailed(result.violations)
        stage = advance(stage, DispatchStage.VALIDATED)

        message = serialize(envelope.type, result.record)
        stage = advance(stage, DispatchStage.SERIALIZED)
    except DispatchError as exc:
        exc.stage = stage.value
        logger.debug("dispatch failed after stage %s: %s", stage.value, exc.kind)
        raise
    logger.debug("dispatched %s (%d bytes)", message.type_id, len(message.value))
    return message
