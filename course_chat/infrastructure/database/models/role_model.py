from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String
from course_chat.infrastructure.database.base_model import BaseModel


class RoleModel(BaseModel):
    __tablename__ = "tbRoles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # STUDENT | INSTRUCTOR | ADMIN
    code: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
