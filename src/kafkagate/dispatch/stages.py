from __future__ import annotations

from enum import Enum


class DispatchStage(str, Enum):
    START = "start"
    DECODED = "decoded"
    MATERIALIZED = "materialized"
    VALIDATED = "validated"
    SERIALIZED = "serialized"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    DispatchStage.START: {DispatchStage.DECODED, DispatchStage.FAILED},
    DispatchStage.DECODED: {DispatchStage.MATERIALIZED, DispatchStage.FAILED},
    DispatchStage.MATERIALIZED: {DispatchStage.VALIDATED, DispatchStage.FAILED},
    DispatchStage.VALIDATED: {DispatchStage.SERIALIZED, DispatchStage.FAILED},
    DispatchStage.SERIALIZED: set(),
    DispatchStage.FAILED: set(),
}


def can_transition(from_stage: DispatchStage | str, to_stage: DispatchStage | str) -> bool:
    """True when a dispatch may move from ``from_stage`` straight to ``to_stage``.

    The pipeline only ever steps forward one stage or drops into FAILED.
    """
    return DispatchStage(to_stage) in ALLOWED_TRANSITIONS[DispatchStage(from_stage)]


def advance(from_stage: DispatchStage, to_stage: DispatchStage) -> DispatchStage:
    if not can_transition(from_stage, to_stage):
        raise RuntimeError(f"illegal dispatch transition {from_stage.value} -> {to_stage.value}")
    return to_stage
