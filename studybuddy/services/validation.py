"""
Validation of the chat message list posted to the relay.

``validate_messages`` accepts whatever JSON the caller sent and either
returns the normalized messages or the first reason the input was rejected.
It performs no I/O and stops at the first invalid element.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from studybuddy.models.chat_model import ChatMessage

MAX_MESSAGE_LENGTH = 5000
MAX_MESSAGES = 50
VALID_ROLES = ("user", "assistant")

# whitespace plus the byte-order mark, which browsers also trim
_EDGE_SPACE = re.compile(r"\A[\s\ufeff]+|[\s\ufeff]+\Z")


class RejectReason(str, Enum):
    INVALID_SHAPE = "InvalidShape"
    EMPTY_INPUT = "EmptyInput"
    TOO_MANY_MESSAGES = "TooManyMessages"
    INVALID_MESSAGE_SHAPE = "InvalidMessageShape"
    INVALID_ROLE = "InvalidRole"
    INVALID_CONTENT_TYPE = "InvalidContentType"
    EMPTY_CONTENT = "EmptyContent"
    CONTENT_TOO_LONG = "ContentTooLong"


@dataclass
class ValidationResult:
    ok: bool
    messages: List[ChatMessage] = field(default_factory=list)
    reason: Optional[RejectReason] = None
    error: Optional[str] = None

    @classmethod
    def accept(cls, messages: List[ChatMessage]) -> "ValidationResult":
        return cls(ok=True, messages=messages)

    @classmethod
    def reject(cls, reason: RejectReason, error: str) -> "ValidationResult":
        return cls(ok=False, reason=reason, error=error)


def validate_message(msg: Any, position: int = 1) -> ValidationResult:
    """Validate a single ``{role, content}`` object; ``position`` is 1-based."""
    if not isinstance(msg, dict):
        return ValidationResult.reject(
            RejectReason.INVALID_MESSAGE_SHAPE, f"Message {position} is invalid"
        )

    role = msg.get("role")
    content = msg.get("content")

    if not isinstance(role, str) or role not in VALID_ROLES:
        return ValidationResult.reject(
            RejectReason.INVALID_ROLE,
            f"Message {position} has invalid role. Must be 'user' or 'assistant'",
        )

    if not isinstance(content, str):
        return ValidationResult.reject(
            RejectReason.INVALID_CONTENT_TYPE, f"Message {position} content must be a string"
        )

    trimmed = _EDGE_SPACE.sub("", content)
    if not trimmed:
        return ValidationResult.reject(
            RejectReason.EMPTY_CONTENT, f"Message {position} content cannot be empty"
        )
    if len(trimmed) > MAX_MESSAGE_LENGTH:
        return ValidationResult.reject(
            RejectReason.CONTENT_TOO_LONG,
            f"Message {position} exceeds maximum length of {MAX_MESSAGE_LENGTH} characters",
        )

    return ValidationResult.accept([ChatMessage(role=role, content=trimmed)])


def validate_messages(value: Any) -> ValidationResult:
    if not isinstance(value, list):
        return ValidationResult.reject(RejectReason.INVALID_SHAPE, "Messages must be an array")
    if len(value) == 0:
        return ValidationResult.reject(RejectReason.EMPTY_INPUT, "At least one message is required")
    if len(value) > MAX_MESSAGES:
        return ValidationResult.reject(
            RejectReason.TOO_MANY_MESSAGES, f"Maximum {MAX_MESSAGES} messages allowed"
        )

    validated: List[ChatMessage] = []
    for i, msg in enumerate(value, start=1):
        result = validate_message(msg, i)
        if not result.ok:
            return result
        validated.extend(result.messages)

    return ValidationResult.accept(validated)
