# course_chat/infrastructure/database/seed.py
"""Create the chat tables and the reference rows they rely on.

    python -m course_chat.infrastructure.database.seed
"""
from sqlalchemy import select
from sqlalchemy.orm import Session

import course_chat.infrastructure.database.models  # noqa: F401
from course_chat.entities.message_type import MessageType
from course_chat.entities.user import Role
from course_chat.infrastructure.database.base_model import BaseModel
from course_chat.infrastructure.database.models.message_type_model import MessageTypeModel
from course_chat.infrastructure.database.models.role_model import RoleModel
from course_chat.infrastructure.database.session import db_session, get_engine

_TYPE_DESCRIPTIONS = {
    MessageType.TEXT: "Plain text message",
    MessageType.FILE: "Generic file attachment",
    MessageType.AUDIO: "Audio recording",
    MessageType.VIDEO: "Video clip",
}


def create_schema() -> None:
    BaseModel.metadata.create_all(get_engine())


def seed_reference_data(session: Session) -> None:
    existing_roles = set(session.execute(select(RoleModel.code)).scalars().all())
    for role in Role:
        if role.value not in existing_roles:
            session.add(RoleModel(code=role.value))

    existing_types = set(session.execute(select(MessageTypeModel.name)).scalars().all())
    for mtype, description in _TYPE_DESCRIPTIONS.items():
        if mtype.value not in existing_types:
            session.add(MessageTypeModel(name=mtype.value, description=description))

    session.flush()


if __name__ == "__main__":
    create_schema()
    with db_session() as s:
        seed_reference_data(s)
