from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel


class MessageTypeModel(BaseModel):
    __tablename__ = "tbChatMessageTypes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # TEXT | FILE | AUDIO | VIDEO
    name: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)

    description: Mapped[str] = mapped_column(String(255), nullable=True)
