# course_chat/repositories/course_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from course_chat.core.base_repository import BaseRepository
from course_chat.infrastructure.database.models.course_model import CourseModel


class CourseRepository(BaseRepository[CourseModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_id(self, course_id: str) -> CourseModel | None:
        stmt = select(CourseModel).where(CourseModel.id == course_id, CourseModel.is_deleted.is_(False))
        return self._session.execute(stmt).scalar_one_or_none()
