from __future__ import annotations

from typing import Any, ClassVar, Tuple

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class MessageRecord(BaseModel):
    """Base for typed message records.

    Fields default to the zero value of their type so a partially filled
    payload still materializes; required-ness is declared in ``REQUIRED`` and
    checked afterwards by the validator, which reports every missing field at
    once instead of stopping at the first.
    """

    # unknown keys are dropped so producers can add fields ahead of consumers
    model_config = ConfigDict(extra="ignore", frozen=True)

    REQUIRED: ClassVar[Tuple[str, ...]] = ()

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_nulls_and_bools(cls, v: Any, info: ValidationInfo):
        field_info = cls.model_fields[info.field_name]
        if v is None:
            return field_info.default
        # JSON true/false are not integers
        if field_info.annotation is int and isinstance(v, bool):
            raise ValueError("boolean is not a valid integer")
        return v


class UserMessage(MessageRecord):
    REQUIRED: ClassVar[Tuple[str, ...]] = ("name", "email", "phone")

    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class PaymentMessage(MessageRecord):
    REQUIRED: ClassVar[Tuple[str, ...]] = ("id", "amount", "status")

    id: str = ""
    amount: int = 0
    status: str = ""
