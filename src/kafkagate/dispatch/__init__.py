from .errors import (
    DecodeError,
    DispatchError,
    FieldCoercionError,
    MalformedContent,
    MissingTopic,
    UnknownType,
    ValidationFailed,
)
from .pipeline import check_topic, decode_envelope, dispatch, materialize, serialize, validate
from .registry import DEFAULT_REGISTRY, FieldSpec, MessageSchema, SchemaRegistry, build_default_registry
from .results import CanonicalMessage, ValidationResult, Violation
from .stages import DispatchStage, can_transition

__all__ = [
    "DecodeError",
    "DispatchError",
    "FieldCoercionError",
    "MalformedContent",
    "MissingTopic",
    "UnknownType",
    "ValidationFailed",
    "check_topic",
    "decode_envelope",
    "dispatch",
    "materialize",
    "serialize",
    "validate",
    "DEFAULT_REGISTRY",
    "FieldSpec",
    "MessageSchema",
    "SchemaRegistry",
    "build_default_registry",
    "CanonicalMessage",
    "ValidationResult",
    "Violation",
    "DispatchStage",
    "can_transition",
]
