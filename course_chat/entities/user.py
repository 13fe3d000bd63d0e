# course_chat/entities/user.py
from enum import Enum


class Role(str, Enum):
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"


# users without a role row still send, and are stamped as students
DEFAULT_SENDER_ROLE = Role.STUDENT.value
