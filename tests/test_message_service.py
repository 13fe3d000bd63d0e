"""Tests for the synchronous message service."""

import logging
import math

import pytest

from course_chat.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from course_chat.infrastructure.database.models import MessageModel
from course_chat.infrastructure.database.session import db_session
from course_chat.repositories.message_detail_repository import MessageDetailRepository
from course_chat.services.message_service import MessageService


def _send_text(run_service, world, content="hi", sender_id=None):
    return run_service(
        lambda svc: svc.send_message(
            course_id=world.course_id,
            sender_id=sender_id or world.student_id,
            type="TEXT",
            content=content,
        )
    )


class TestSendMessage:
    """Synchronous send path."""

    def test_text_echoes_content_and_broadcasts_once(self, run_service, world, notifier):
        response = _send_text(run_service, world, "hello there")

        assert response.content == "hello there"
        assert response.type == "TEXT"
        assert response.sender_role == "STUDENT"
        assert response.course_id == world.course_id

        created = notifier.of_kind("created")
        assert len(created) == 1
        assert created[0].course_id == world.course_id
        assert created[0].message["id"] == response.id
        assert created[0].message["content"] == "hello there"

    def test_type_lookup_is_case_insensitive(self, run_service, world):
        response = run_service(
            lambda svc: svc.send_message(
                course_id=world.course_id, sender_id=world.student_id, type="text", content="lower"
            )
        )
        assert response.type == "TEXT"

    def test_instructor_role_is_snapshotted(self, run_service, world):
        response = _send_text(run_service, world, sender_id=world.instructor_id)
        assert response.sender_role == "INSTRUCTOR"
        assert response.sender_thumbnail_url == "https://cdn.example.com/ines.png"

    def test_missing_role_defaults_to_student(self, run_service, world):
        response = _send_text(run_service, world, sender_id=world.roleless_id)
        assert response.sender_role == "STUDENT"

    def test_video_uses_content_as_url(self, run_service, world):
        response = run_service(
            lambda svc: svc.send_message(
                course_id=world.course_id,
                sender_id=world.student_id,
                type="VIDEO",
                content="https://cdn/v.mp4",
                file_name="v.mp4",
                file_size=2048,
                thumbnail_url="https://cdn/v.jpg",
                duration=90,
            )
        )
        assert response.type == "VIDEO"
        assert response.video_url == "https://cdn/v.mp4"
        assert response.video_thumbnail_url == "https://cdn/v.jpg"
        assert response.video_duration == 90
        assert response.content is None

    def test_unknown_course(self, run_service, world, notifier):
        with pytest.raises(NotFoundError, match="Course not found"):
            run_service(
                lambda svc: svc.send_message(
                    course_id="missing", sender_id=world.student_id, type="TEXT", content="x"
                )
            )
        assert notifier.events == []

    def test_unknown_sender(self, run_service, world):
        with pytest.raises(NotFoundError, match="Sender not found"):
            _send_text(run_service, world, sender_id="ghost")

    def test_unknown_type(self, run_service, world):
        with pytest.raises(NotFoundError, match="Invalid message type"):
            run_service(
                lambda svc: svc.send_message(
                    course_id=world.course_id, sender_id=world.student_id, type="STICKER"
                )
            )

    def test_outsider_is_forbidden(self, run_service, world, notifier):
        with pytest.raises(ForbiddenError):
            _send_text(run_service, world, sender_id=world.outsider_id)
        assert notifier.events == []

    def test_failure_after_skeleton_rolls_back(self, world, notifier, monkeypatch):
        def boom(self, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(MessageDetailRepository, "attach", boom)

        with pytest.raises(RuntimeError):
            with db_session() as session:
                MessageService.for_session(session, notifier).send_message(
                    course_id=world.course_id, sender_id=world.student_id, type="TEXT", content="x"
                )

        with db_session() as session:
            assert session.query(MessageModel).count() == 0
        assert notifier.events == []

    def test_broken_broadcast_keeps_committed_send(self, world, notifier, monkeypatch, caplog):
        def socket_down(event):
            raise RuntimeError("socket down")

        monkeypatch.setattr(notifier, "notify_message_created", socket_down)

        with caplog.at_level(logging.ERROR, logger="course_chat.infrastructure.database.session"):
            with db_session() as session:
                response = MessageService.for_session(session, notifier).send_message(
                    course_id=world.course_id, sender_id=world.student_id, type="TEXT", content="stored"
                )

        assert response.content == "stored"
        with db_session() as session:
            assert session.get(MessageModel, response.id) is not None
        assert any("after_commit callback" in r.getMessage() for r in caplog.records)


class TestGetMessages:
    """Offset and keyset retrieval."""

    def test_offset_mode_totals(self, run_service, world, seed_messages):
        seed_messages(7)

        result = run_service(
            lambda svc: svc.get_messages(course_id=world.course_id, user_id=world.student_id, page=0, size=3)
        )

        assert result.total_elements == 7
        assert result.total_pages == math.ceil(7 / 3)
        assert result.page == 0
        assert result.size == 3
        assert [m.content for m in result.messages] == ["message 0", "message 1", "message 2"]

    def test_pages_stay_ascending(self, run_service, world, seed_messages):
        seed_messages(5)

        pages = [
            run_service(
                lambda svc, p=p: svc.get_messages(course_id=world.course_id, user_id=world.student_id, page=p, size=2)
            ).messages
            for p in range(3)
        ]
        flat = [m for page in pages for m in page]

        assert len(flat) == 5
        stamps = [m.created_at for m in flat]
        assert stamps == sorted(stamps)
        assert pages[0][-1].created_at <= pages[1][0].created_at

    def test_before_cursor(self, run_service, world, seed_messages):
        ids = seed_messages(6)

        result = run_service(
            lambda svc: svc.get_messages(
                course_id=world.course_id, user_id=world.student_id, size=2, before_message_id=ids[4]
            )
        )

        assert [m.id for m in result.messages] == [ids[2], ids[3]]
        assert result.page is None
        assert result.total_elements is None
        assert result.total_pages is None
        assert result.size == 2

    def test_after_cursor(self, run_service, world, seed_messages):
        ids = seed_messages(6)

        result = run_service(
            lambda svc: svc.get_messages(
                course_id=world.course_id, user_id=world.student_id, size=3, after_message_id=ids[1]
            )
        )

        assert [m.id for m in result.messages] == [ids[2], ids[3], ids[4]]

    def test_both_cursors_is_bad_request(self, run_service, world, seed_messages):
        ids = seed_messages(3)

        with pytest.raises(BadRequestError, match="both"):
            run_service(
                lambda svc: svc.get_messages(
                    course_id=world.course_id,
                    user_id=world.student_id,
                    before_message_id=ids[2],
                    after_message_id=ids[0],
                )
            )

    def test_cursor_from_other_course_is_bad_request(self, run_service, world, seed_messages):
        foreign = seed_messages(1, course_id=world.other_course_id)

        with pytest.raises(BadRequestError, match="beforeMessageId not found"):
            run_service(
                lambda svc: svc.get_messages(
                    course_id=world.course_id, user_id=world.student_id, before_message_id=foreign[0]
                )
            )

    @pytest.mark.parametrize("page,size", [(-1, 10), (0, 0), (0, 101)])
    def test_bad_page_bounds(self, run_service, world, page, size):
        with pytest.raises(BadRequestError):
            run_service(
                lambda svc: svc.get_messages(
                    course_id=world.course_id, user_id=world.student_id, page=page, size=size
                )
            )

    def test_media_collapses_to_file(self, run_service, world):
        run_service(
            lambda svc: svc.send_message(
                course_id=world.course_id,
                sender_id=world.student_id,
                type="AUDIO",
                content="https://cdn/a.mp3",
                file_name="a.mp3",
                file_size=100,
                duration=12,
            )
        )

        result = run_service(lambda svc: svc.get_messages(course_id=world.course_id, user_id=world.student_id))

        assert len(result.messages) == 1
        item = result.messages[0]
        assert item.type == "file"
        assert item.file_url == "https://cdn/a.mp3"
        assert item.file_name == "a.mp3"
        assert item.content is None

    def test_outsider_is_forbidden(self, run_service, world):
        with pytest.raises(ForbiddenError):
            run_service(lambda svc: svc.get_messages(course_id=world.course_id, user_id=world.outsider_id))


class TestListMessages:
    """Full-response paginated listing."""

    def test_page_info(self, run_service, world, seed_messages):
        seed_messages(5)

        result = run_service(
            lambda svc: svc.list_messages(course_id=world.course_id, user_id=world.instructor_id, page=1, size=2)
        )

        assert [m.content for m in result.content] == ["message 2", "message 3"]
        assert result.page.total_elements == 5
        assert result.page.total_pages == 3
        assert not result.page.first
        assert not result.page.last

    def test_type_filter(self, run_service, world, seed_messages):
        seed_messages(2)
        run_service(
            lambda svc: svc.send_message(
                course_id=world.course_id, sender_id=world.student_id, type="FILE", content="https://cdn/f.pdf"
            )
        )

        result = run_service(
            lambda svc: svc.list_messages(course_id=world.course_id, user_id=world.student_id, type="file")
        )

        assert result.page.total_elements == 1
        assert result.content[0].type == "FILE"
        assert result.content[0].file_url == "https://cdn/f.pdf"

    def test_outsider_is_forbidden(self, run_service, world):
        with pytest.raises(ForbiddenError):
            run_service(lambda svc: svc.list_messages(course_id=world.course_id, user_id=world.outsider_id))


class TestUpdateMessage:
    """Only the sender may edit, and only TEXT."""

    def test_sender_updates_text(self, run_service, world, notifier):
        sent = _send_text(run_service, world, "first")

        updated = run_service(
            lambda svc: svc.update_message(
                course_id=world.course_id,
                message_id=sent.id,
                user_id=world.student_id,
                type="TEXT",
                content="second",
            )
        )

        assert updated.content == "second"
        assert updated.updated_at is not None

        events = notifier.of_kind("updated")
        assert len(events) == 1
        assert events[0].message["content"] == "second"
        assert events[0].updated_by == world.student_id

    def test_non_owner_is_forbidden(self, run_service, world):
        sent = _send_text(run_service, world)

        with pytest.raises(ForbiddenError):
            run_service(
                lambda svc: svc.update_message(
                    course_id=world.course_id,
                    message_id=sent.id,
                    user_id=world.instructor_id,
                    type="TEXT",
                    content="hijack",
                )
            )

    def test_file_message_is_not_updatable(self, run_service, world):
        sent = run_service(
            lambda svc: svc.send_message(
                course_id=world.course_id, sender_id=world.student_id, type="FILE", content="https://cdn/f.pdf"
            )
        )

        with pytest.raises(BadRequestError, match="Only TEXT"):
            run_service(
                lambda svc: svc.update_message(
                    course_id=world.course_id,
                    message_id=sent.id,
                    user_id=world.student_id,
                    type="TEXT",
                    content="x",
                )
            )

    def test_payload_type_must_be_text(self, run_service, world):
        sent = _send_text(run_service, world)

        with pytest.raises(BadRequestError, match="must be TEXT"):
            run_service(
                lambda svc: svc.update_message(
                    course_id=world.course_id,
                    message_id=sent.id,
                    user_id=world.student_id,
                    type="FILE",
                    content="x",
                )
            )

    def test_outsider_is_forbidden(self, run_service, world):
        sent = _send_text(run_service, world)

        with pytest.raises(ForbiddenError):
            run_service(
                lambda svc: svc.update_message(
                    course_id=world.course_id,
                    message_id=sent.id,
                    user_id=world.outsider_id,
                    type="TEXT",
                    content="x",
                )
            )

    def test_message_from_other_course_is_not_found(self, run_service, world, seed_messages):
        foreign = seed_messages(1, course_id=world.other_course_id)

        with pytest.raises(NotFoundError):
            run_service(
                lambda svc: svc.update_message(
                    course_id=world.course_id,
                    message_id=foreign[0],
                    user_id=world.student_id,
                    type="TEXT",
                    content="x",
                )
            )


class TestDeleteMessage:
    """Deletion rights and cascade."""

    def test_delete_removes_message_and_detail(self, run_service, world, notifier):
        sent = _send_text(run_service, world)

        run_service(
            lambda svc: svc.delete_message(course_id=world.course_id, message_id=sent.id, user_id=world.student_id)
        )

        with pytest.raises(NotFoundError):
            run_service(
                lambda svc: svc.get_message(course_id=world.course_id, message_id=sent.id, user_id=world.student_id)
            )
        with db_session() as session:
            assert MessageDetailRepository(session).get(sent.id) is None

        deleted = notifier.of_kind("deleted")
        assert len(deleted) == 1
        assert deleted[0].message_id == sent.id
        assert deleted[0].deleted_by == world.student_id

    def test_stranger_in_course_is_forbidden(self, run_service, world):
        sent = _send_text(run_service, world, sender_id=world.instructor_id)

        with pytest.raises(ForbiddenError):
            run_service(
                lambda svc: svc.delete_message(
                    course_id=world.course_id, message_id=sent.id, user_id=world.roleless_id
                )
            )

    def test_outsider_is_forbidden(self, run_service, world):
        sent = _send_text(run_service, world)

        with pytest.raises(ForbiddenError):
            run_service(
                lambda svc: svc.delete_message(
                    course_id=world.course_id, message_id=sent.id, user_id=world.outsider_id
                )
            )

    def test_missing_message(self, run_service, world):
        with pytest.raises(NotFoundError, match="Message not found"):
            run_service(
                lambda svc: svc.delete_message(
                    course_id=world.course_id, message_id="missing", user_id=world.student_id
                )
            )


class TestCourseScenario:
    """Student writes, instructor deletes."""

    def test_student_message_deleted_by_instructor(self, run_service, world):
        sent = _send_text(run_service, world, "hi")
        assert sent.content == "hi"
        assert sent.sender_role == "STUDENT"

        run_service(
            lambda svc: svc.delete_message(course_id=world.course_id, message_id=sent.id, user_id=world.instructor_id)
        )

        history = run_service(lambda svc: svc.get_messages(course_id=world.course_id, user_id=world.instructor_id))
        assert sent.id not in [m.id for m in history.messages]
