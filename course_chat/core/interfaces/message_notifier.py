# course_chat/core/interfaces/message_notifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class MessageCreatedEvent:
    course_id: str
    message_id: str
    message: dict[str, Any]  # full MessageResponse dump


@dataclass(frozen=True)
class MessageUpdatedEvent:
    course_id: str
    message_id: str
    updated_by: str
    message: dict[str, Any]
    timestamp_iso: str


@dataclass(frozen=True)
class MessageDeletedEvent:
    course_id: str
    message_id: str
    deleted_by: str
    timestamp_iso: str


@dataclass(frozen=True)
class MessageStatusEvent:
    course_id: str
    temp_id: str
    status: str

    # unknown until the pipeline gets there; FAILED only has it for a committed row
    message_id: str | None = None
    content: str | None = None
    sender_name: str | None = None
    sender_role: str | None = None
    sender_thumbnail_url: str | None = None
    file_url: str | None = None
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"temp_id": self.temp_id, "status": self.status}
        for key in (
            "message_id",
            "content",
            "sender_name",
            "sender_role",
            "sender_thumbnail_url",
            "file_url",
            "error",
        ):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


class MessageNotifier(Protocol):
    def notify_message_created(self, event: MessageCreatedEvent) -> None:
        ...

    def notify_message_updated(self, event: MessageUpdatedEvent) -> None:
        ...

    def notify_message_deleted(self, event: MessageDeletedEvent) -> None:
        ...

    def notify_status(self, event: MessageStatusEvent) -> None:
        ...
