# course_chat/repositories/user_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from course_chat.core.base_repository import BaseRepository
from course_chat.infrastructure.database.models.role_model import RoleModel
from course_chat.infrastructure.database.models.user_model import UserModel


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_with_role(self, user_id: str) -> tuple[UserModel, str | None] | None:
        stmt = (
            select(UserModel, RoleModel.code)
            .outerjoin(RoleModel, RoleModel.id == UserModel.role_id)
            .where(UserModel.id == user_id, UserModel.is_deleted.is_(False))
        )
        row = self._session.execute(stmt).first()
        if row is None:
            return None
        user, role_code = row
        return user, role_code
