# course_chat/services/message_mapper.py
from __future__ import annotations

from course_chat.api.schemas.message_schema import MessageResponse, SimpleMessageResponse
from course_chat.entities.message_detail import (
    AudioDetail,
    FileDetail,
    MessageDetail,
    TextDetail,
    VideoDetail,
    media_url_of,
)
from course_chat.infrastructure.database.models.message_model import MessageModel
from course_chat.infrastructure.database.models.user_model import UserModel


def to_response(msg: MessageModel, sender: UserModel, type_name: str, detail: MessageDetail | None) -> MessageResponse:
    text = detail if isinstance(detail, TextDetail) else None
    file = detail if isinstance(detail, FileDetail) else None
    audio = detail if isinstance(detail, AudioDetail) else None
    video = detail if isinstance(detail, VideoDetail) else None

    return MessageResponse(
        id=msg.id,
        course_id=msg.course_id,
        sender_id=sender.id,
        sender_name=sender.name,
        sender_role=msg.sender_role,
        sender_thumbnail_url=sender.thumbnail_url,
        type=type_name,
        content=text.content if text else None,
        file_url=file.file_url if file else None,
        file_name=file.file_name if file else None,
        file_size=file.file_size if file else None,
        file_type=file.mime_type if file else None,
        audio_url=audio.audio_url if audio else None,
        audio_duration=audio.duration if audio else None,
        video_url=video.video_url if video else None,
        video_thumbnail_url=video.thumbnail_url if video else None,
        video_duration=video.duration if video else None,
        created_at=msg.created_at,
        updated_at=msg.updated_at,
    )


def to_simple_response(msg: MessageModel, sender: UserModel, detail: MessageDetail | None) -> SimpleMessageResponse:
    # audio and video collapse onto the generic file fields
    kind = "text"
    content = file_url = file_name = mime_type = None
    file_size = None

    if isinstance(detail, TextDetail):
        content = detail.content
    elif detail is not None:
        kind = "file"
        file_url = media_url_of(detail)
        file_name, file_size, mime_type = detail.file_name, detail.file_size, detail.mime_type

    return SimpleMessageResponse(
        id=msg.id,
        sender_id=sender.id,
        sender_name=sender.name,
        sender_thumbnail_url=sender.thumbnail_url,
        sender_role=msg.sender_role,
        type=kind,
        content=content,
        file_url=file_url,
        file_name=file_name,
        file_size=file_size,
        mime_type=mime_type,
        created_at=msg.created_at,
    )
