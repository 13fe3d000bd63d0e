# course_chat/services/async_message_service.py
"""Accept-now, finish-later message sending.

``accept`` does the cheap checks on the request thread and returns an
``AcceptedSend``. Its background half only starts when ``start()`` is called,
which the route does once the Accepted response has gone out. From then on
the only way to learn the outcome is the ``message:status`` events, emitted
per task in the order PENDING -> [UPLOADING] -> SENT | FAILED.
"""
from __future__ import annotations

import contextvars
import logging
import threading
from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from sqlalchemy.orm import Session

from course_chat.api.schemas.message_schema import AsyncMessageAcknowledgment
from course_chat.core.exceptions import BadRequestError
from course_chat.core.interfaces.message_notifier import (
    MessageCreatedEvent,
    MessageNotifier,
    MessageStatusEvent,
)
from course_chat.entities.message_detail import build_detail
from course_chat.entities.message_type import AsyncStatus, MessageType
from course_chat.infrastructure.tasks.background_executor import BackgroundExecutor
from course_chat.services.message_service import MessageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AsyncSendCommand:
    course_id: str
    sender_id: str
    temp_id: str
    message_type: MessageType
    content: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    mime_type: Optional[str] = None
    resolution: Optional[str] = None


class AcceptedSend:
    """Acknowledgment for the caller plus the background work it promises."""

    def __init__(self, ack: AsyncMessageAcknowledgment, launch: Callable[[], None]) -> None:
        self.ack = ack
        self._launch = launch
        self._lock = threading.Lock()
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        # one-shot, a second call is ignored
        with self._lock:
            if self._started:
                return
            self._started = True
        self._launch()


class AsyncMessageService:
    def __init__(
        self,
        *,
        session_factory: Callable[[], ContextManager[Session]],
        notifier: MessageNotifier,
        executor: BackgroundExecutor,
    ) -> None:
        self._session_factory = session_factory
        self._notifier = notifier
        self._executor = executor

    def accept(
        self,
        *,
        course_id: str | None,
        sender_id: str,
        temp_id: str | None,
        type: str | None,
        content: str | None = None,
        file_url: str | None = None,
        file_name: str | None = None,
        file_size: int | None = None,
        thumbnail_url: str | None = None,
        duration: int | None = None,
        mime_type: str | None = None,
        resolution: str | None = None,
    ) -> AcceptedSend:
        if not course_id or not course_id.strip():
            raise BadRequestError("Invalid courseId format")
        if not temp_id or not temp_id.strip():
            raise BadRequestError("TempId is required")
        try:
            message_type = MessageType.from_value(type)
        except ValueError:
            raise BadRequestError(f"Invalid message type: {type}") from None

        with self._session_factory() as session:
            svc = MessageService.for_session(session, self._notifier)
            course = svc.get_course_or_404(course_id)
            sender, _role = svc.get_user_or_404(sender_id)
            svc.ensure_access(course, sender.id)

        command = AsyncSendCommand(
            course_id=course_id,
            sender_id=sender_id,
            temp_id=temp_id,
            message_type=message_type,
            content=content,
            file_url=file_url,
            file_name=file_name,
            file_size=file_size,
            thumbnail_url=thumbnail_url,
            duration=duration,
            mime_type=mime_type,
            resolution=resolution,
        )
        logger.info("Async message accepted: temp_id=%s course=%s type=%s", temp_id, course_id, message_type.value)

        # the task runs in the request's context even when started after it ended
        ctx = contextvars.copy_context()

        def launch() -> None:
            ctx.run(self._executor.submit, self.process, command, label=f"async-send:{temp_id}")

        ack = AsyncMessageAcknowledgment(temp_id=temp_id, status=AsyncStatus.PENDING.value)
        return AcceptedSend(ack, launch)

    def process(self, command: AsyncSendCommand) -> AsyncStatus:
        """Background half. Never raises; the outcome goes out as status events."""
        message_id: str | None = None
        committed = False
        try:
            self._status(command, AsyncStatus.PENDING)

            with self._session_factory() as session:
                svc = MessageService.for_session(session, self._notifier)

                course = svc.get_course_or_404(command.course_id)
                sender, role_code = svc.get_user_or_404(command.sender_id, "Sender not found")
                type_model = svc.get_type_or_404(command.message_type.value)

                msg = svc.insert_skeleton(course=course, sender=sender, role_code=role_code, message_type=type_model)
                message_id = msg.id

                if command.message_type.is_media:
                    self._status(command, AsyncStatus.UPLOADING, message_id=message_id)

                # media is already uploaded, only its URL and metadata are stored
                detail = build_detail(
                    command.message_type,
                    content=command.content,
                    media_url=command.file_url,
                    file_name=command.file_name,
                    file_size=command.file_size,
                    thumbnail_url=command.thumbnail_url,
                    duration=command.duration,
                    mime_type=command.mime_type,
                    resolution=command.resolution,
                )
                svc.attach_detail(msg, command.message_type, detail)
                response = svc.load_response(message_id)

            # committed: receivers can now fetch it
            committed = True
            self._notifier.notify_message_created(
                MessageCreatedEvent(
                    course_id=command.course_id,
                    message_id=message_id,
                    message=response.model_dump(mode="json"),
                )
            )
            self._status(
                command,
                AsyncStatus.SENT,
                message_id=message_id,
                content=response.content,
                sender_name=response.sender_name,
                sender_role=response.sender_role,
                sender_thumbnail_url=response.sender_thumbnail_url,
                file_url=command.file_url if command.message_type.is_media else None,
            )
            logger.info("Async message sent: temp_id=%s message_id=%s", command.temp_id, message_id)
            return AsyncStatus.SENT

        except Exception as e:
            logger.exception("Async message failed: temp_id=%s course=%s", command.temp_id, command.course_id)
            kind = "Media" if command.message_type.is_media else "Text"
            # a rolled-back skeleton id can never be fetched, so it is left out
            self._status(
                command,
                AsyncStatus.FAILED,
                message_id=message_id if committed else None,
                error=f"{kind} processing error: {e}",
            )
            return AsyncStatus.FAILED

    def _status(self, command: AsyncSendCommand, status: AsyncStatus, **fields) -> None:
        self._notifier.notify_status(
            MessageStatusEvent(
                course_id=command.course_id,
                temp_id=command.temp_id,
                status=status.value,
                **fields,
            )
        )
