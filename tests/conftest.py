"""Pytest configuration and fixtures."""

import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

# Settings are read at import time, so the test database goes in first.
_DB_DIR = tempfile.mkdtemp(prefix="course-chat-tests-")
os.environ.setdefault("DB_URL", f"sqlite:///{Path(_DB_DIR) / 'chat.db'}")
os.environ.setdefault("SOCKETIO_ASYNC_MODE", "threading")
os.environ.setdefault("DEBUG", "false")

import pytest  # noqa: E402

from course_chat.entities.message_detail import TextDetail  # noqa: E402
from course_chat.entities.message_type import MessageType  # noqa: E402
from course_chat.infrastructure.database.base_model import BaseModel  # noqa: E402
from course_chat.infrastructure.database.models import (  # noqa: E402
    CourseModel,
    EnrollmentModel,
    MessageModel,
    MessageTypeModel,
    RoleModel,
    UserModel,
)
from course_chat.infrastructure.database.seed import seed_reference_data  # noqa: E402
from course_chat.infrastructure.database.session import db_session, get_engine  # noqa: E402
from course_chat.infrastructure.tasks.background_executor import BackgroundExecutor  # noqa: E402
from course_chat.repositories.message_detail_repository import MessageDetailRepository  # noqa: E402
from course_chat.services.message_service import MessageService  # noqa: E402


class RecordingNotifier:
    """Collects every broadcast as ``(kind, event)`` in emission order."""

    def __init__(self):
        self._lock = threading.Lock()
        self.events = []

    def _record(self, kind, event):
        with self._lock:
            self.events.append((kind, event))

    def notify_message_created(self, event):
        self._record("created", event)

    def notify_message_updated(self, event):
        self._record("updated", event)

    def notify_message_deleted(self, event):
        self._record("deleted", event)

    def notify_status(self, event):
        self._record("status", event)

    def of_kind(self, kind):
        with self._lock:
            return [e for k, e in self.events if k == kind]

    def statuses(self, temp_id=None):
        return [
            e.status
            for e in self.of_kind("status")
            if temp_id is None or e.temp_id == temp_id
        ]


@pytest.fixture(autouse=True)
def database():
    """Fresh schema plus reference rows for every test."""
    engine = get_engine()
    BaseModel.metadata.drop_all(engine)
    BaseModel.metadata.create_all(engine)
    with db_session() as session:
        seed_reference_data(session)
    yield engine


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def executor():
    ex = BackgroundExecutor(max_workers=2, name="test-async")
    yield ex
    ex.shutdown(wait=True)


def _role_id(session, code):
    return session.query(RoleModel).filter_by(code=code).one().id


@pytest.fixture
def world():
    """Course C with instructor I, enrolled student S, an outsider and an admin."""
    with db_session() as session:
        instructor = UserModel(
            name="Ines Instructor",
            email="instructor@example.com",
            role_id=_role_id(session, "INSTRUCTOR"),
            thumbnail_url="https://cdn.example.com/ines.png",
        )
        student = UserModel(
            name="Sam Student",
            email="student@example.com",
            role_id=_role_id(session, "STUDENT"),
        )
        outsider = UserModel(
            name="Olly Outsider",
            email="outsider@example.com",
            role_id=_role_id(session, "STUDENT"),
        )
        admin = UserModel(
            name="Ada Admin",
            email="admin@example.com",
            role_id=_role_id(session, "ADMIN"),
        )
        roleless = UserModel(name="Nora Norole", email="norole@example.com", role_id=None)
        session.add_all([instructor, student, outsider, admin, roleless])
        session.flush()

        course = CourseModel(instructor_id=instructor.id, slug="python-101", title="Python 101")
        other_course = CourseModel(instructor_id=instructor.id, slug="rust-101", title="Rust 101")
        session.add_all([course, other_course])
        session.flush()

        session.add_all(
            [
                EnrollmentModel(user_id=student.id, course_id=course.id),
                EnrollmentModel(user_id=roleless.id, course_id=course.id),
                EnrollmentModel(user_id=outsider.id, course_id=other_course.id, status="CANCELLED"),
            ]
        )

        return SimpleNamespace(
            course_id=course.id,
            other_course_id=other_course.id,
            instructor_id=instructor.id,
            student_id=student.id,
            outsider_id=outsider.id,
            admin_id=admin.id,
            roleless_id=roleless.id,
        )


@pytest.fixture
def seed_messages(world):
    """Insert ``n`` TEXT messages one second apart, oldest first. Returns their ids."""

    def _seed(n, *, course_id=None, sender_id=None, start=None):
        base = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        ids = []
        with db_session() as session:
            text_type = session.query(MessageTypeModel).filter_by(name="TEXT").one()
            details = MessageDetailRepository(session)
            for i in range(n):
                msg = MessageModel(
                    course_id=course_id or world.course_id,
                    sender_id=sender_id or world.student_id,
                    sender_role="STUDENT",
                    message_type_id=text_type.id,
                    created_at=base + timedelta(seconds=i),
                )
                session.add(msg)
                session.flush()
                details.attach(message=msg, message_type=MessageType.TEXT, detail=TextDetail(content=f"message {i}"))
                ids.append(msg.id)
        return ids

    return _seed


@pytest.fixture
def run_service(notifier):
    """Run ``fn(service)`` inside one committed transaction, like a route does."""

    def _run(fn):
        with db_session() as session:
            return fn(MessageService.for_session(session, notifier))

    return _run
