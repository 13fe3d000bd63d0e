# course_chat/infrastructure/realtime/socketio_message_notifier.py
from __future__ import annotations

import logging

from course_chat.core.interfaces.message_notifier import (
    MessageCreatedEvent,
    MessageDeletedEvent,
    MessageNotifier,
    MessageStatusEvent,
    MessageUpdatedEvent,
)
from course_chat.core.security_context import get_current_user_id
from course_chat.infrastructure.realtime.socketio_server import socketio

logger = logging.getLogger(__name__)


def course_room(course_id: str) -> str:
    return f"course:{course_id}"


def user_room(user_id: str) -> str:
    return f"user:{user_id}"


class SocketIOMessageNotifier(MessageNotifier):
    def notify_message_created(self, event: MessageCreatedEvent) -> None:
        socketio.emit("message:new", event.message, room=course_room(event.course_id))

    def notify_message_updated(self, event: MessageUpdatedEvent) -> None:
        payload = dict(event.message)
        payload["updated_by"] = event.updated_by
        payload["timestamp"] = event.timestamp_iso
        socketio.emit("message:updated", payload, room=course_room(event.course_id))

    def notify_message_deleted(self, event: MessageDeletedEvent) -> None:
        payload = {
            "type": "messageDeleted",
            "message_id": event.message_id,
            "course_id": event.course_id,
            "deleted_by": event.deleted_by,
            "timestamp": event.timestamp_iso,
        }
        socketio.emit("message:deleted", payload, room=course_room(event.course_id))

    def notify_status(self, event: MessageStatusEvent) -> None:
        payload = event.to_payload()

        # 1) everyone in the course
        socketio.emit("message:status", payload, room=course_room(event.course_id))

        # 2) sender's own channel, best effort
        user_id = get_current_user_id()
        if not user_id:
            return
        try:
            socketio.emit("message:status", payload, room=user_room(user_id))
        except Exception as e:
            logger.warning("Failed to send personal status update to user %s: %s", user_id, e)
