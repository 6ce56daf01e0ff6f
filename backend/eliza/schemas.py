from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, model_validator


class FailureType(str, Enum):
    REQUEST_SCHEMA_INVALID = "REQUEST_SCHEMA_INVALID"
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"
    EMPTY_INPUT = "EMPTY_INPUT"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INTERNAL_ERROR_SANITIZED = "INTERNAL_ERROR_SANITIZED"


class MessageRequest(BaseModel):
    text: StrictStr = Field(..., min_length=1)
    trace: StrictBool = False

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _strip_text(cls, values: dict) -> dict:
        if isinstance(values, dict) and isinstance(values.get("text"), str):
            values = {**values, "text": values["text"].strip()}
        return values


class SessionCreated(BaseModel):
    session_id: StrictStr
    greeting: StrictStr

    model_config = ConfigDict(extra="forbid")


class MessageResponse(BaseModel):
    session_id: StrictStr
    response: StrictStr
    turn: int
    trace: Optional[StrictStr] = None

    model_config = ConfigDict(extra="forbid")


class ErrorResponse(BaseModel):
    ok: bool = False
    failure_type: FailureType
    message: StrictStr

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "ErrorResponse",
    "FailureType",
    "MessageRequest",
    "MessageResponse",
    "SessionCreated",
]
