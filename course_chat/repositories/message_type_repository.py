# course_chat/repositories/message_type_repository.py

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from course_chat.core.base_repository import BaseRepository
from course_chat.infrastructure.database.models.message_type_model import MessageTypeModel


class MessageTypeRepository(BaseRepository[MessageTypeModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_name(self, name: str) -> MessageTypeModel | None:
        if not name:
            return None
        stmt = select(MessageTypeModel).where(func.upper(MessageTypeModel.name) == name.strip().upper())
        return self._session.execute(stmt).scalar_one_or_none()
