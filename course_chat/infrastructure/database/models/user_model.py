# course_chat/infrastructure/database/models/user_model.py

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel, new_id, utcnow


class UserModel(BaseModel):
    __tablename__ = "tbUsers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    thumbnail_url: Mapped[str] = mapped_column(String(500), nullable=True)

    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tbRoles.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
