# course_chat/infrastructure/database/models/enrollment_model.py

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from course_chat.infrastructure.database.base_model import BaseModel, new_id, utcnow


class EnrollmentModel(BaseModel):
    __tablename__ = "tbEnrollments"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("tbUsers.id"), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("tbCourses.id"), nullable=False)

    # ACTIVE | CANCELLED | COMPLETED
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")

    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
