# course_chat/entities/message_type.py
from enum import Enum


class MessageType(str, Enum):
    TEXT = "TEXT"
    FILE = "FILE"
    AUDIO = "AUDIO"
    VIDEO = "VIDEO"

    @classmethod
    def from_value(cls, value: str | None) -> "MessageType":
        if value is None:
            raise ValueError("Message type is required")
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown message type: {value}") from None

    @property
    def is_text(self) -> bool:
        return self is MessageType.TEXT

    @property
    def is_media(self) -> bool:
        return self is not MessageType.TEXT


class AsyncStatus(str, Enum):
    PENDING = "PENDING"
    UPLOADING = "UPLOADING"
    SENT = "SENT"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (AsyncStatus.SENT, AsyncStatus.FAILED)
