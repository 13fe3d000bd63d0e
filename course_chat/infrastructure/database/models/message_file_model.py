# course_chat/infrastructure/database/models/message_file_model.py

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel


class MessageFileModel(BaseModel):
    __tablename__ = "tbChatMessageFiles"

    message_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tbChatMessages.id", ondelete="CASCADE"), primary_key=True
    )

    file_url: Mapped[str] = mapped_column(String(1000), nullable=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=True)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=True)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=True)
