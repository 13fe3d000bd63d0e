# course_chat/repositories/message_repository.py

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.orm import Session, aliased

from course_chat.core.base_repository import BaseRepository
from course_chat.infrastructure.database.models.message_model import MessageModel
from course_chat.infrastructure.database.models.message_type_model import MessageTypeModel
from course_chat.infrastructure.database.models.user_model import UserModel


class MessageRepository(BaseRepository[MessageModel]):
    """Rows come back as ``(msg, sender, type_name)`` tuples."""

    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def _rows(self):
        sender = aliased(UserModel)
        return (
            select(MessageModel, sender, MessageTypeModel.name)
            .join(sender, sender.id == MessageModel.sender_id)
            .join(MessageTypeModel, MessageTypeModel.id == MessageModel.message_type_id)
        )

    def add(self, model: MessageModel) -> MessageModel:
        self._session.add(model)
        self._session.flush()
        return model

    def get_by_id(self, message_id: str) -> MessageModel | None:
        return self._session.get(MessageModel, message_id)

    def get_row(self, *, message_id: str):
        stmt = self._rows().where(MessageModel.id == message_id)
        return self._session.execute(stmt).first()  # (msg, sender, type_name) | None

    def delete(self, *, message_id: str) -> bool:
        res = self._session.execute(delete(MessageModel).where(MessageModel.id == message_id))
        return (res.rowcount or 0) > 0

    def list_rows_by_course(
        self,
        *,
        course_id: str,
        limit: int,
        offset: int,
        type_name: str | None = None,
    ):
        stmt = self._rows().where(MessageModel.course_id == course_id)
        if type_name:
            stmt = stmt.where(func.upper(MessageTypeModel.name) == type_name.upper())
        stmt = stmt.order_by(MessageModel.created_at.asc(), MessageModel.id.asc()).limit(limit).offset(offset)
        return list(self._session.execute(stmt).all())

    def count_by_course(self, *, course_id: str, type_name: str | None = None) -> int:
        stmt = select(func.count(MessageModel.id)).where(MessageModel.course_id == course_id)
        if type_name:
            stmt = stmt.join(MessageTypeModel, MessageTypeModel.id == MessageModel.message_type_id).where(
                func.upper(MessageTypeModel.name) == type_name.upper()
            )
        return int(self._session.execute(stmt).scalar_one())

    def list_rows_before(self, *, course_id: str, reference: MessageModel, limit: int):
        """The ``limit`` messages right before ``reference``, oldest first."""
        stmt = (
            self._rows()
            .where(
                MessageModel.course_id == course_id,
                or_(
                    MessageModel.created_at < reference.created_at,
                    and_(MessageModel.created_at == reference.created_at, MessageModel.id < reference.id),
                ),
            )
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(limit)
        )
        rows = list(self._session.execute(stmt).all())
        rows.reverse()
        return rows

    def list_rows_after(self, *, course_id: str, reference: MessageModel, limit: int):
        stmt = (
            self._rows()
            .where(
                MessageModel.course_id == course_id,
                or_(
                    MessageModel.created_at > reference.created_at,
                    and_(MessageModel.created_at == reference.created_at, MessageModel.id > reference.id),
                ),
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
            .limit(limit)
        )
        return list(self._session.execute(stmt).all())
