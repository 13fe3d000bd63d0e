from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel


class MessageVideoModel(BaseModel):
    __tablename__ = "tbChatMessageVideos"

    message_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tbChatMessages.id", ondelete="CASCADE"), primary_key=True
    )

    video_url: Mapped[str] = mapped_column(String(1000), nullable=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=True)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=True)
    thumbnail_url: Mapped[str] = mapped_column(String(1000), nullable=True)
    duration: Mapped[int] = mapped_column(BigInteger, nullable=True)  # seconds
    mime_type: Mapped[str] = mapped_column(String(100), nullable=True)
    resolution: Mapped[str] = mapped_column(String(20), nullable=True)
