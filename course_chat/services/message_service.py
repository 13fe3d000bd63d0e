# course_chat/services/message_service.py

import logging
import math
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from course_chat.api.schemas.message_schema import (
    MessageResponse,
    MessagesListResponse,
    PageInfo,
    PaginatedMessagesResponse,
)
from course_chat.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from course_chat.core.interfaces.message_notifier import (
    MessageCreatedEvent,
    MessageDeletedEvent,
    MessageNotifier,
    MessageUpdatedEvent,
)
from course_chat.entities.message_detail import MessageDetail, build_detail
from course_chat.entities.message_type import MessageType
from course_chat.entities.user import DEFAULT_SENDER_ROLE
from course_chat.infrastructure.database.models.course_model import CourseModel
from course_chat.infrastructure.database.models.message_model import MessageModel
from course_chat.infrastructure.database.models.message_type_model import MessageTypeModel
from course_chat.infrastructure.database.models.user_model import UserModel
from course_chat.infrastructure.database.session import after_commit
from course_chat.repositories.course_repository import CourseRepository
from course_chat.repositories.enrollment_repository import EnrollmentRepository
from course_chat.repositories.message_detail_repository import MessageDetailRepository
from course_chat.repositories.message_repository import MessageRepository
from course_chat.repositories.message_type_repository import MessageTypeRepository
from course_chat.repositories.user_repository import UserRepository
from course_chat.services.access_policy import CourseAccessPolicy
from course_chat.services.message_mapper import to_response, to_simple_response

logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageService:
    def __init__(
        self,
        *,
        session: Session,
        course_repo: CourseRepository,
        user_repo: UserRepository,
        msg_repo: MessageRepository,
        detail_repo: MessageDetailRepository,
        type_repo: MessageTypeRepository,
        policy: CourseAccessPolicy,
        notifier: MessageNotifier,
    ) -> None:
        self._session = session
        self._course_repo = course_repo
        self._user_repo = user_repo
        self._msg_repo = msg_repo
        self._detail_repo = detail_repo
        self._type_repo = type_repo
        self._policy = policy
        self._notifier = notifier

    @classmethod
    def for_session(cls, session: Session, notifier: MessageNotifier) -> "MessageService":
        return cls(
            session=session,
            course_repo=CourseRepository(session),
            user_repo=UserRepository(session),
            msg_repo=MessageRepository(session),
            detail_repo=MessageDetailRepository(session),
            type_repo=MessageTypeRepository(session),
            policy=CourseAccessPolicy(EnrollmentRepository(session)),
            notifier=notifier,
        )

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------

    def get_course_or_404(self, course_id: str) -> CourseModel:
        course = self._course_repo.get_by_id(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return course

    def get_user_or_404(self, user_id: str, message: str = "User not found") -> tuple[UserModel, str | None]:
        row = self._user_repo.get_with_role(user_id)
        if row is None:
            raise NotFoundError(message)
        return row

    def get_type_or_404(self, name: str) -> MessageTypeModel:
        mtype = self._type_repo.get_by_name(name)
        if mtype is None:
            raise NotFoundError("Invalid message type")
        return mtype

    def ensure_access(self, course: CourseModel, user_id: str, message: str = "User not enrolled in course") -> None:
        self._policy.ensure_access(course, user_id, message)

    def _get_course_message_or_404(self, course_id: str, message_id: str):
        row = self._msg_repo.get_row(message_id=message_id)
        if row is None:
            raise NotFoundError("Message not found")
        msg, _sender, _type_name = row
        if msg.course_id != course_id:
            raise NotFoundError("Message not found in this course")
        return row

    # ------------------------------------------------------------------
    # building blocks shared with the async pipeline
    # ------------------------------------------------------------------

    def insert_skeleton(
        self,
        *,
        course: CourseModel,
        sender: UserModel,
        role_code: str | None,
        message_type: MessageTypeModel,
    ) -> MessageModel:
        msg = MessageModel(
            course_id=course.id,
            sender_id=sender.id,
            sender_role=role_code or DEFAULT_SENDER_ROLE,
            message_type_id=message_type.id,
        )
        return self._msg_repo.add(msg)

    def attach_detail(self, msg: MessageModel, message_type: MessageType, detail: MessageDetail) -> MessageDetail:
        return self._detail_repo.attach(message=msg, message_type=message_type, detail=detail)

    def load_response(self, message_id: str) -> MessageResponse:
        row = self._msg_repo.get_row(message_id=message_id)
        if row is None:
            raise NotFoundError("Message not found")
        msg, sender, type_name = row
        return to_response(msg, sender, type_name, self._detail_repo.get(msg.id))

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    def send_message(
        self,
        *,
        course_id: str,
        sender_id: str,
        type: str,
        content: str | None = None,
        file_name: str | None = None,
        file_size: int | None = None,
        thumbnail_url: str | None = None,
        duration: int | None = None,
        mime_type: str | None = None,
        resolution: str | None = None,
    ) -> MessageResponse:
        course = self.get_course_or_404(course_id)
        sender, role_code = self.get_user_or_404(sender_id, "Sender not found")
        type_model = self.get_type_or_404(type)

        self.ensure_access(course, sender.id, "User not authorized to send messages in this course")

        try:
            message_type = MessageType.from_value(type_model.name)
        except ValueError:
            raise BadRequestError(f"Unsupported message type: {type_model.name}") from None

        msg = self.insert_skeleton(course=course, sender=sender, role_code=role_code, message_type=type_model)

        # TEXT keeps the text in content, media sends its URL there
        detail = build_detail(
            message_type,
            content=content if message_type.is_text else None,
            media_url=content if message_type.is_media else None,
            file_name=file_name,
            file_size=file_size,
            thumbnail_url=thumbnail_url,
            duration=duration,
            mime_type=mime_type,
            resolution=resolution,
        )
        self.attach_detail(msg, message_type, detail)

        response = to_response(msg, sender, type_model.name, detail)
        logger.info("Message sent: id=%s course=%s type=%s", msg.id, course_id, type_model.name)

        event = MessageCreatedEvent(course_id=course_id, message_id=msg.id, message=response.model_dump(mode="json"))
        after_commit(self._session, lambda: self._notifier.notify_message_created(event))
        return response

    def list_messages(
        self,
        *,
        course_id: str,
        user_id: str,
        type: str | None = None,
        page: int = 0,
        size: int = 20,
    ) -> PaginatedMessagesResponse:
        self._validate_page(page, size)

        course = self.get_course_or_404(course_id)
        user, _role = self.get_user_or_404(user_id)
        self.ensure_access(course, user.id, "User not authorized to view messages in this course")

        type_name = type.strip() if type and type.strip() else None

        rows = self._msg_repo.list_rows_by_course(
            course_id=course_id, limit=size, offset=page * size, type_name=type_name
        )
        total = self._msg_repo.count_by_course(course_id=course_id, type_name=type_name)
        total_pages = math.ceil(total / size)

        details = self._detail_repo.get_by_message_ids([msg.id for (msg, _s, _t) in rows])
        content = [to_response(msg, sender, type_name_, details.get(msg.id)) for (msg, sender, type_name_) in rows]

        return PaginatedMessagesResponse(
            content=content,
            page=PageInfo(
                number=page,
                size=size,
                total_elements=total,
                total_pages=total_pages,
                first=page == 0,
                last=page >= total_pages - 1,
            ),
        )

    def get_messages(
        self,
        *,
        course_id: str,
        user_id: str,
        page: int = 0,
        size: int = 20,
        before_message_id: str | None = None,
        after_message_id: str | None = None,
    ) -> MessagesListResponse:
        self._validate_page(page, size)

        course = self.get_course_or_404(course_id)
        user, _role = self.get_user_or_404(user_id)
        self.ensure_access(course, user.id)

        if before_message_id is not None or after_message_id is not None:
            if before_message_id is not None and after_message_id is not None:
                raise BadRequestError(
                    "Invalid query parameters: cannot specify both beforeMessageId and afterMessageId"
                )

            if before_message_id is not None:
                reference = self._get_cursor_or_400(course_id, before_message_id, "beforeMessageId")
                rows = self._msg_repo.list_rows_before(course_id=course_id, reference=reference, limit=size)
            else:
                reference = self._get_cursor_or_400(course_id, after_message_id, "afterMessageId")
                rows = self._msg_repo.list_rows_after(course_id=course_id, reference=reference, limit=size)

            # cursor mode: totals are unknown
            return MessagesListResponse(messages=self._simple(rows), page=None, size=size)

        rows = self._msg_repo.list_rows_by_course(course_id=course_id, limit=size, offset=page * size)
        total = self._msg_repo.count_by_course(course_id=course_id)

        return MessagesListResponse(
            messages=self._simple(rows),
            page=page,
            size=size,
            total_elements=total,
            total_pages=math.ceil(total / size),
        )

    def get_message(self, *, course_id: str, message_id: str, user_id: str) -> MessageResponse:
        course = self.get_course_or_404(course_id)
        user, _role = self.get_user_or_404(user_id)
        self.ensure_access(course, user.id)

        msg, sender, type_name = self._get_course_message_or_404(course_id, message_id)
        return to_response(msg, sender, type_name, self._detail_repo.get(msg.id))

    def update_message(
        self,
        *,
        course_id: str,
        message_id: str,
        user_id: str,
        type: str,
        content: str,
    ) -> MessageResponse:
        self._require_ids(course_id, message_id)

        course = self.get_course_or_404(course_id)
        user, _role = self.get_user_or_404(user_id)
        self.ensure_access(course, user.id)

        msg, sender, type_name = self._get_course_message_or_404(course_id, message_id)

        if not self._policy.can_update(msg, user.id):
            raise ForbiddenError("User is not the message owner")

        if type_name.upper() != MessageType.TEXT.value:
            raise BadRequestError("Only TEXT messages can be updated")

        if type != MessageType.TEXT.value:
            raise BadRequestError("Message type must be TEXT")

        # last writer wins, there is no version column
        self._detail_repo.set_text_content(message_id=msg.id, content=content)
        msg.updated_at = _utcnow()
        self._msg_repo.flush()

        response = to_response(msg, sender, type_name, self._detail_repo.get(msg.id))
        logger.info("Message updated: id=%s course=%s by=%s", msg.id, course_id, user.id)

        event = MessageUpdatedEvent(
            course_id=course_id,
            message_id=msg.id,
            updated_by=user.id,
            message=response.model_dump(mode="json"),
            timestamp_iso=_utcnow().isoformat(),
        )
        after_commit(self._session, lambda: self._notifier.notify_message_updated(event))
        return response

    def delete_message(self, *, course_id: str, message_id: str, user_id: str) -> None:
        self._require_ids(course_id, message_id)

        course = self.get_course_or_404(course_id)
        user, role_code = self.get_user_or_404(user_id)
        self.ensure_access(course, user.id)

        msg, _sender, _type_name = self._get_course_message_or_404(course_id, message_id)

        if not self._policy.can_delete(course, msg, user.id, role_code):
            raise ForbiddenError("User is not the message owner or lacks permission")

        # detail first, then the message, same transaction
        self._detail_repo.delete_for_message(message_id=msg.id)
        if not self._msg_repo.delete(message_id=msg.id):
            raise NotFoundError("Message not found")

        logger.info("Message deleted: id=%s course=%s by=%s", message_id, course_id, user.id)

        event = MessageDeletedEvent(
            course_id=course_id,
            message_id=message_id,
            deleted_by=user.id,
            timestamp_iso=_utcnow().isoformat(),
        )
        after_commit(self._session, lambda: self._notifier.notify_message_deleted(event))

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _simple(self, rows):
        details = self._detail_repo.get_by_message_ids([msg.id for (msg, _s, _t) in rows])
        return [to_simple_response(msg, sender, details.get(msg.id)) for (msg, sender, _t) in rows]

    def _get_cursor_or_400(self, course_id: str, message_id: str, param: str) -> MessageModel:
        reference = self._msg_repo.get_by_id(message_id)
        if reference is None or reference.course_id != course_id:
            raise BadRequestError(f"Invalid query parameters: {param} not found")
        return reference

    @staticmethod
    def _validate_page(page: int, size: int) -> None:
        if page < 0:
            raise BadRequestError("Invalid query parameters: page must be non-negative")
        if size < MIN_PAGE_SIZE or size > MAX_PAGE_SIZE:
            raise BadRequestError(
                f"Invalid query parameters: size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}"
            )

    @staticmethod
    def _require_ids(course_id: str, message_id: str) -> None:
        if not course_id or not course_id.strip():
            raise BadRequestError("Invalid courseId format")
        if not message_id or not message_id.strip():
            raise BadRequestError("Invalid messageId format")
