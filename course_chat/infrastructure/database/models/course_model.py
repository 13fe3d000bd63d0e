# course_chat/infrastructure/database/models/course_model.py

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel, new_id, utcnow


class CourseModel(BaseModel):
    __tablename__ = "tbCourses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    instructor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tbUsers.id"), nullable=False
    )

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
