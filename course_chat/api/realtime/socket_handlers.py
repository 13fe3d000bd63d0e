# course_chat/api/realtime/socket_handlers.py
from __future__ import annotations

import logging

from flask import request
from flask_socketio import disconnect, emit, join_room, leave_room

from course_chat.core.exceptions import AppError, UnauthorizedError
from course_chat.infrastructure.database.session import db_session
from course_chat.infrastructure.realtime.socketio_message_notifier import (
    SocketIOMessageNotifier,
    course_room,
    user_room,
)
from course_chat.infrastructure.realtime.socketio_server import socketio
from course_chat.infrastructure.security.jwt_provider import JwtProvider
from course_chat.services.message_service import MessageService

logger = logging.getLogger(__name__)


def _get_bearer_token() -> str | None:
    # 1) Authorization: Bearer <token>
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip()

    # 2) querystring ?token=...
    token = request.args.get("token")
    if token:
        return str(token).strip()

    return None


def _course_id_from(data) -> str | None:
    if not isinstance(data, dict):
        return None
    course_id = data.get("course_id")
    return str(course_id) if course_id else None


def register_socket_handlers() -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        token = _get_bearer_token()
        if not token and isinstance(auth, dict):
            token = auth.get("token")
        if not token:
            return disconnect()

        try:
            claims = JwtProvider().decode(token)
        except UnauthorizedError:
            return disconnect()

        user_id = str(claims["sub"])
        request.environ["auth_user_id"] = user_id
        join_room(user_room(user_id))

    @socketio.on("course:join")
    def on_join(data):
        user_id = request.environ.get("auth_user_id")
        course_id = _course_id_from(data)
        if not user_id or not course_id:
            emit("course:join_denied", {"course_id": course_id, "error": "course_id is required"})
            return

        try:
            with db_session() as session:
                svc = MessageService.for_session(session, SocketIOMessageNotifier())
                course = svc.get_course_or_404(course_id)
                svc.ensure_access(course, user_id)
        except AppError as e:
            logger.info("Join denied: user=%s course=%s reason=%s", user_id, course_id, e)
            emit("course:join_denied", {"course_id": course_id, "error": str(e)})
            return

        join_room(course_room(course_id))
        emit("course:joined", {"course_id": course_id})

    @socketio.on("course:leave")
    def on_leave(data):
        course_id = _course_id_from(data)
        if not course_id:
            return
        leave_room(course_room(course_id))
        emit("course:left", {"course_id": course_id})
