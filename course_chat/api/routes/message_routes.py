# course_chat/api/routes/message_routes.py

from flask import Blueprint, jsonify, make_response, request

from course_chat.api.middlewares.auth_middleware import auth_user_id, require_auth
from course_chat.api.schemas.message_schema import (
    AsyncSendMessageRequestInput,
    SendMessageRequestInput,
    UpdateMessageRequestInput,
)
from course_chat.core.exceptions import BadRequestError
from course_chat.infrastructure.database.session import db_session
from course_chat.infrastructure.realtime.socketio_message_notifier import SocketIOMessageNotifier
from course_chat.infrastructure.tasks.background_executor import background_executor
from course_chat.services.async_message_service import AsyncMessageService
from course_chat.services.message_service import MessageService


bp_msg = Blueprint(
    "messages",
    __name__,
    url_prefix="/courses/<course_id>/messages",
)


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise BadRequestError(f"Invalid query parameters: {name} must be an integer") from None


def _str_arg(name: str) -> str | None:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _build_service(session) -> MessageService:
    return MessageService.for_session(session, SocketIOMessageNotifier())


def _build_async_service() -> AsyncMessageService:
    return AsyncMessageService(
        session_factory=db_session,
        notifier=SocketIOMessageNotifier(),
        executor=background_executor,
    )


@bp_msg.post("")
@require_auth
def send_message(course_id: str):
    user_id = auth_user_id()
    payload = SendMessageRequestInput.model_validate(request.get_json(force=True))

    with db_session() as session:
        svc = _build_service(session)
        response = svc.send_message(course_id=course_id, sender_id=user_id, **payload.model_dump())

    return jsonify(response.model_dump(mode="json")), 201


@bp_msg.post("/async")
@require_auth
def send_message_async(course_id: str):
    user_id = auth_user_id()
    payload = AsyncSendMessageRequestInput.model_validate(request.get_json(force=True))

    accepted = _build_async_service().accept(course_id=course_id, sender_id=user_id, **payload.model_dump())

    # background work starts once the ack has been written to the client
    response = make_response(jsonify(accepted.ack.model_dump()), 202)
    response.call_on_close(accepted.start)
    return response


@bp_msg.get("")
@require_auth
def list_messages(course_id: str):
    user_id = auth_user_id()

    with db_session() as session:
        svc = _build_service(session)
        result = svc.list_messages(
            course_id=course_id,
            user_id=user_id,
            type=_str_arg("type"),
            page=_int_arg("page", 0),
            size=_int_arg("size", 20),
        )

    return jsonify(result.model_dump(mode="json")), 200


@bp_msg.get("/history")
@require_auth
def get_messages(course_id: str):
    user_id = auth_user_id()

    with db_session() as session:
        svc = _build_service(session)
        result = svc.get_messages(
            course_id=course_id,
            user_id=user_id,
            page=_int_arg("page", 0),
            size=_int_arg("size", 20),
            before_message_id=_str_arg("before_message_id"),
            after_message_id=_str_arg("after_message_id"),
        )

    return jsonify(result.model_dump(mode="json")), 200


@bp_msg.get("/<message_id>")
@require_auth
def get_message(course_id: str, message_id: str):
    user_id = auth_user_id()

    with db_session() as session:
        svc = _build_service(session)
        response = svc.get_message(course_id=course_id, message_id=message_id, user_id=user_id)

    return jsonify(response.model_dump(mode="json")), 200


@bp_msg.put("/<message_id>")
@require_auth
def update_message(course_id: str, message_id: str):
    user_id = auth_user_id()
    payload = UpdateMessageRequestInput.model_validate(request.get_json(force=True))

    with db_session() as session:
        svc = _build_service(session)
        response = svc.update_message(
            course_id=course_id,
            message_id=message_id,
            user_id=user_id,
            type=payload.type,
            content=payload.content,
        )

    return jsonify(response.model_dump(mode="json")), 200


@bp_msg.delete("/<message_id>")
@require_auth
def delete_message(course_id: str, message_id: str):
    user_id = auth_user_id()

    with db_session() as session:
        svc = _build_service(session)
        svc.delete_message(course_id=course_id, message_id=message_id, user_id=user_id)

    return ("", 204)
