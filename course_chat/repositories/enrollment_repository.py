# course_chat/repositories/enrollment_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from course_chat.core.base_repository import BaseRepository
from course_chat.infrastructure.database.models.enrollment_model import EnrollmentModel

ACTIVE = "ACTIVE"


class EnrollmentRepository(BaseRepository[EnrollmentModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def is_enrolled(self, *, user_id: str, course_id: str) -> bool:
        stmt = select(EnrollmentModel.id).where(
            EnrollmentModel.user_id == user_id,
            EnrollmentModel.course_id == course_id,
            EnrollmentModel.status == ACTIVE,
        )
        return self._session.execute(stmt).first() is not None
