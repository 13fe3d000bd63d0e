# course_chat/infrastructure/database/models/message_model.py

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel, new_id, utcnow


class MessageModel(BaseModel):
    __tablename__ = "tbChatMessages"
    __table_args__ = (Index("ix_chat_messages_course_created", "course_id", "created_at", "id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tbCourses.id"), nullable=False
    )

    sender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tbUsers.id"), nullable=False
    )

    # role of the sender when the message was written, never re-derived
    sender_role: Mapped[str] = mapped_column(String(30), nullable=False)

    # FK -> tbChatMessageTypes.id
    message_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tbChatMessageTypes.id"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
