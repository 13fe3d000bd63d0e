from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel


class MessageTextModel(BaseModel):
    __tablename__ = "tbChatMessageTexts"

    message_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tbChatMessages.id", ondelete="CASCADE"), primary_key=True
    )

    content: Mapped[str] = mapped_column(Text, nullable=True)
