# course_chat/services/access_policy.py
from __future__ import annotations

from course_chat.core.exceptions import ForbiddenError
from course_chat.entities.user import Role
from course_chat.infrastructure.database.models.course_model import CourseModel
from course_chat.infrastructure.database.models.message_model import MessageModel
from course_chat.repositories.enrollment_repository import EnrollmentRepository


class CourseAccessPolicy:
    """Who may read and write a course's chat."""

    def __init__(self, enrollment_repo: EnrollmentRepository) -> None:
        self._enrollment_repo = enrollment_repo

    def is_instructor(self, course: CourseModel, user_id: str) -> bool:
        return course.instructor_id == user_id

    def can_access(self, course: CourseModel, user_id: str) -> bool:
        if self.is_instructor(course, user_id):
            return True
        return self._enrollment_repo.is_enrolled(user_id=user_id, course_id=course.id)

    def ensure_access(self, course: CourseModel, user_id: str, message: str = "User not enrolled in course") -> None:
        if not self.can_access(course, user_id):
            raise ForbiddenError(message)

    def can_update(self, message: MessageModel, user_id: str) -> bool:
        return message.sender_id == user_id

    def can_delete(self, course: CourseModel, message: MessageModel, user_id: str, role_code: str | None) -> bool:
        if message.sender_id == user_id:
            return True
        if self.is_instructor(course, user_id):
            return True
        return role_code == Role.ADMIN.value
